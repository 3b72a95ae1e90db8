import logging_bus


def test_emit_and_drain():
    logging_bus.drain()
    logging_bus.clear()
    seen = []
    logging_bus.subscribe(seen.append)
    logging_bus.emit("INFO", "STREAM", "Chunk", size=3)
    assert logging_bus.drain() == 1
    assert seen[-1].msg == "Chunk" and seen[-1].meta == {"size": 3}
    assert logging_bus.snapshot()[-1].kind == "STREAM"


def test_filters_and_verbose():
    logging_bus.drain()
    logging_bus.set_kind_filter({"NETWORK": False})
    logging_bus.set_verbose(False)
    try:
        logging_bus.emit("INFO", "NETWORK", "hidden")
        logging_bus.emit("INFO", "BUILD", "quiet")
        logging_bus.emit("WARN", "BUILD", "shown")
        assert logging_bus.drain() == 1
    finally:
        logging_bus.set_kind_filter({"NETWORK": True})
        logging_bus.set_verbose(True)


def test_file_logger(tmp_path):
    path = tmp_path / "activity.jsonl"
    logging_bus.drain()
    logging_bus.set_file_logger(str(path))
    try:
        logging_bus.emit("ERROR", "SYSTEM", "written")
        logging_bus.drain()
    finally:
        logging_bus.set_file_logger(None)
    assert '"msg": "written"' in path.read_text(encoding="utf-8")
