import os
import threading
from tkinter import filedialog, messagebox

from errors import InputValidationError
from logic import file_generator, file_ingest, prompt_builder, search
from logic.transcript_engine import TurnOutcome
from logging_bus import emit
from ui.questionnaire import QuestionnaireDialog
from ui.tabs.response_tab import render

POLL_MS = 50


class UIEvents:
    """Connects widgets to the session state and the transcript engine.

    Engine turns run on a worker thread. The engine only flags the transcript
    as dirty; the Tk thread polls the flag and re-renders.
    """

    def __init__(self, app, config, engine, state, widgets, files_update, status_bar, analyze_btn):
        self.app = app
        self.config = config
        self.engine = engine
        self.state = state
        self.widgets = widgets
        self.files_update = files_update
        self.status_bar = status_bar
        self.analyze_btn = analyze_btn
        self.error = engine.last_error
        self._dirty = True
        self._was_busy = False

        engine.subscribe(self._on_transcript)
        engine.subscribe_errors(self._on_error)
        widgets['send_btn'].config(command=self.send_follow_up)
        widgets['follow_up_entry'].bind('<Return>', lambda _e: self.send_follow_up())
        widgets['cancel_btn'].config(command=self.cancel)
        widgets['download_btn'].config(command=self.download_script)
        widgets['search_var'].trace_add('write', lambda *_a: self._mark_dirty())
        analyze_btn.config(command=self.start_analysis)
        self.refresh_files()
        self._poll()

    # --- engine callbacks (worker thread) ---
    def _on_transcript(self, _snapshot):
        self._dirty = True

    def _on_error(self, message):
        self.error = message
        self._dirty = True

    def _mark_dirty(self):
        self._dirty = True

    def _poll(self):
        busy = self.engine.busy
        if busy != self._was_busy:
            self._set_busy(busy)
            self._was_busy = busy
        if self._dirty:
            self._dirty = False
            self.render()
        self.app.after(POLL_MS, self._poll)

    def render(self):
        query = self.widgets['search_var'].get()
        transcript = self.engine.transcript
        views = search.project(transcript, query)
        if query and transcript and not views:
            placeholder = f'No messages match "{query}".'
        elif self.state.documents:
            placeholder = 'Click "Analyze & Synthesize" to start the process.'
        else:
            placeholder = 'Upload your Python files, and the analysis and synthesized script will appear here.'
        render(self.widgets['transcript_text'], views, query, self.error, placeholder)
        has_script = bool(self.engine.latest_script()) and not self.engine.busy
        self.widgets['download_btn'].config(state='normal' if has_script else 'disabled')

    def _set_busy(self, busy):
        state = 'disabled' if busy else 'normal'
        self.analyze_btn.config(state=state)
        self.widgets['send_btn'].config(state=state)
        self.widgets['follow_up_entry'].config(state=state)
        if busy:
            self.widgets['cancel_btn'].pack(side='left')
        else:
            self.widgets['cancel_btn'].pack_forget()

    # --- files ---
    def refresh_files(self):
        self.files_update(self.state.documents, self.state.selected_document())
        count = len(self.state.documents)
        self.analyze_btn.config(text=f'Analyze & Synthesize {count} File(s)')
        self._dirty = True

    def _add_paths(self, paths):
        docs = file_ingest.ingest_paths(
            paths, self.state.names, self.config.settings.get('source_extensions', ['.py'])
        )
        added = self.state.add_documents(docs)
        self.status_bar.set_status(f'Added {len(added)} file(s)')
        self.refresh_files()

    def add_files(self):
        paths = filedialog.askopenfilenames(filetypes=[('Python files', '*.py')])
        if paths:
            self._add_paths(paths)

    def add_folder(self):
        folder = filedialog.askdirectory()
        if folder:
            self._add_paths([folder])

    def select_file(self, name):
        self.state.select(name)
        self.refresh_files()

    def clear_all(self):
        if self.engine.busy:
            self.status_bar.set_status('⚠️ Cancel the running request first.')
            return
        if not messagebox.askyesno('Clear All', 'Remove all files and the conversation?'):
            return
        self.engine.clear()
        self.state.clear()
        self.error = None
        self.refresh_files()
        self.status_bar.set_status('Cleared')

    # --- turns ---
    def _run_turn(self, label, call):
        def worker():
            try:
                result = call()
            except InputValidationError as e:
                self.app.after(0, lambda msg=e.message: self.status_bar.set_status(f'⚠️ {msg}'))
                return
            except Exception as e:
                emit('ERROR', 'SYSTEM', f'{label} failed', error=str(e))
                self.app.after(0, lambda msg=str(e): self.status_bar.set_status(f'⚠️ Error: {msg}'))
                return
            self.app.after(0, lambda: self._turn_done(label, result))

        threading.Thread(target=worker, daemon=True).start()

    def _turn_done(self, label, result):
        if result.outcome is TurnOutcome.SUCCESS:
            self.status_bar.set_status(f'✅ {label} done.')
        elif result.outcome is TurnOutcome.CANCELLED:
            self.status_bar.set_status('⛔ Cancelled')
        else:
            self.status_bar.set_status(f'⚠️ {result.error_message}')
        self._dirty = True

    def start_analysis(self):
        documents = list(self.state.documents)
        if not documents:
            self.status_bar.set_status('⚠️ Please upload at least one Python file to review.')
            return
        preferences = QuestionnaireDialog(self.app).show()
        if preferences is None:
            return
        tokens = prompt_builder.estimate_prompt_tokens(documents, preferences, self.engine.model)
        self.status_bar.set_prompt_tokens(tokens, self.engine.model)
        self.status_bar.set_status('Analyzing…')
        self.error = None
        self._run_turn('Analysis', lambda: self.engine.start_analysis(documents, preferences))

    def send_follow_up(self):
        message = self.widgets['follow_up_var'].get().strip()
        if not message or self.engine.busy:
            return
        self.widgets['follow_up_var'].set('')
        self.status_bar.set_status('Waiting for response…')
        self.error = None
        self._run_turn('Reply', lambda: self.engine.send_follow_up(message))

    def cancel(self):
        if self.engine.cancel():
            self.status_bar.set_status('Cancelling…')

    def download_script(self):
        script = self.engine.latest_script()
        ext = self.config.settings.get('script_extension', 'py')
        if not script:
            self.status_bar.set_status('⚠️ No synthesized script yet.')
            return
        path = filedialog.asksaveasfilename(
            initialfile=file_generator.script_filename(ext),
            defaultextension=f'.{ext}',
        )
        if not path:
            return
        try:
            saved = file_generator.save_script(os.path.dirname(path), script, ext, os.path.basename(path))
        except OSError as e:
            emit('ERROR', 'SYSTEM', 'Could not save script', error=str(e))
            messagebox.showerror('Save Error', str(e))
            return
        self.status_bar.set_status(f'✅ Saved {saved}')


__all__ = ['UIEvents']
