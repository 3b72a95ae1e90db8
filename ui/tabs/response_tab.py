import tkinter as tk
from tkinter import ttk
from typing import List, Optional

from logic.extractor import classify_lines
from logic.search import MessageView, highlight_spans
from models import Role

COPIED_MS = 2000


def create_tab(parent):
    frame = ttk.Frame(parent)

    search_bar = ttk.Frame(frame, padding=(0, 0, 0, 5))
    search_bar.pack(fill='x')
    ttk.Label(search_bar, text='🔍').pack(side='left')
    search_var = tk.StringVar()
    ttk.Entry(search_bar, textvariable=search_var).pack(side='left', fill='x', expand=True, padx=5)
    download_btn = ttk.Button(search_bar, text='⬇ Download Script')
    download_btn.pack(side='right')

    response_frame = ttk.LabelFrame(frame, text='Analysis & Synthesis', padding=10)
    response_frame.pack(fill='both', expand=True)
    text_container = ttk.Frame(response_frame)
    text_container.pack(fill='both', expand=True)
    transcript_text = tk.Text(text_container, wrap='word', state='disabled')
    scroll = ttk.Scrollbar(text_container, orient='vertical', command=transcript_text.yview)
    transcript_text.configure(yscrollcommand=scroll.set)
    transcript_text.pack(side='left', fill='both', expand=True)
    scroll.pack(side='right', fill='y')
    transcript_text.tag_configure('speaker', font=('TkDefaultFont', 10, 'bold'))
    transcript_text.tag_configure('section', font=('TkDefaultFont', 12, 'bold'), spacing1=8)
    transcript_text.tag_configure('heading', font=('TkDefaultFont', 10, 'bold'), spacing1=4)
    transcript_text.tag_configure('bullet', lmargin1=15, lmargin2=25)
    transcript_text.tag_configure('code', font=('TkFixedFont', 10), background='#1e1e1e', foreground='#d4d4d4')
    transcript_text.tag_configure('user', foreground='#4ea1ff')
    transcript_text.tag_configure('highlight', background='#c9a227', foreground='black')
    transcript_text.tag_configure('error', foreground='#ff6b6b')

    input_bar = ttk.Frame(frame, padding=(0, 5, 0, 0))
    input_bar.pack(fill='x')
    follow_up_var = tk.StringVar()
    follow_up_entry = ttk.Entry(input_bar, textvariable=follow_up_var)
    follow_up_entry.pack(side='left', fill='x', expand=True)
    send_btn = ttk.Button(input_bar, text='Send')
    send_btn.pack(side='left', padx=5)
    cancel_btn = ttk.Button(input_bar, text='Cancel')
    cancel_btn.pack(side='left')
    cancel_btn.pack_forget()

    return {
        'frame': frame,
        'search_var': search_var,
        'transcript_text': transcript_text,
        'follow_up_var': follow_up_var,
        'follow_up_entry': follow_up_entry,
        'send_btn': send_btn,
        'cancel_btn': cancel_btn,
        'download_btn': download_btn,
    }


def _insert_line(widget: tk.Text, text: str, tag: str, query: str) -> None:
    start = widget.index('end-1c')
    widget.insert(tk.END, text + '\n', tag)
    for s, e in highlight_spans(text, query):
        widget.tag_add('highlight', f"{start}+{s}c", f"{start}+{e}c")


def copy_code(widget: tk.Misc, code: str) -> None:
    widget.clipboard_clear()
    widget.clipboard_append(code)


def _insert_copy_button(widget: tk.Text, code: str) -> None:
    def on_copy():
        copy_code(widget, code)
        button.config(text='Copied!')
        widget.after(COPIED_MS, lambda: button.winfo_exists() and button.config(text='Copy'))

    button = ttk.Button(widget, text='Copy', command=on_copy)
    widget.window_create(tk.END, window=button)
    widget.insert(tk.END, '\n')


def _insert_runs(widget: tk.Text, runs, view: MessageView, query: str) -> None:
    for run in runs:
        if run.kind == 'code':
            _insert_copy_button(widget, run.text)
            widget.insert(tk.END, run.text + '\n', 'code')
            continue
        line_query = query if run.text in view.highlights else ''
        for kind, line in classify_lines(run.text):
            _insert_line(widget, ('• ' + line) if kind == 'bullet' else line, kind, line_query)


def render(widget: tk.Text, views: List[MessageView], query: str, error: Optional[str] = None,
           placeholder: str = '') -> None:
    widget.configure(state='normal')
    for name in widget.window_names():
        widget.nametowidget(name).destroy()
    widget.delete('1.0', tk.END)
    if error:
        widget.insert(tk.END, error + '\n\n', 'error')
    if not views:
        widget.insert(tk.END, placeholder)
    for view in views:
        if view.message.role == Role.USER:
            widget.insert(tk.END, 'You\n', 'speaker')
            _insert_line(widget, view.message.content, 'user', query)
        else:
            widget.insert(tk.END, 'Model\n', 'speaker')
            doc = view.document
            if doc.has_script_header:
                if any(r.text.strip() for r in doc.analysis):
                    widget.insert(tk.END, 'Best Practices & Novelty Analysis\n', 'section')
                    _insert_runs(widget, doc.analysis, view, query)
                if any(r.text.strip() for r in doc.script):
                    widget.insert(tk.END, 'Synthesized Super Script\n', 'section')
                    _insert_runs(widget, doc.script, view, query)
            else:
                _insert_runs(widget, doc.fallback, view, query)
        widget.insert(tk.END, '\n')
    widget.configure(state='disabled')
    widget.see(tk.END)


__all__ = ['create_tab', 'render', 'copy_code']
