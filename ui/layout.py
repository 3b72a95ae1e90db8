import tkinter as tk
from tkinter import ttk
from ttkbootstrap import Style

from ui.status_bar import StatusBar
from ui.tabs.files_tab import create_tab as create_files_tab
from ui.tabs.response_tab import create_tab as create_response_tab
from ui.events import UIEvents


def launch_ui(config, engine, state):
    app = tk.Tk()
    app.title('Code Synthesizer')
    app.geometry('1200x750')
    Style(config.settings.get('theme', 'darkly'))

    # Header controls
    header = ttk.Frame(app, padding=10)
    header.pack(fill='x')
    ttk.Label(header, text='Code Synthesizer', font=('TkDefaultFont', 16, 'bold')).pack(side='left')
    clear_btn = ttk.Button(header, text='🧹 Clear All')
    folder_btn = ttk.Button(header, text='🗂️ Add Folder')
    upload_btn = ttk.Button(header, text='📂 Upload Python Files')
    for b in (clear_btn, folder_btn, upload_btn):
        b.pack(side='right', padx=2)

    status_bar = StatusBar(app)

    # Main layout
    content_pane = ttk.Panedwindow(app, orient='horizontal')
    content_pane.pack(fill='both', expand=True, padx=10, pady=(0, 10))
    left_panel = ttk.Frame(content_pane)
    content_pane.add(left_panel, weight=2)
    right_panel = ttk.Frame(content_pane)
    content_pane.add(right_panel, weight=3)

    events = None
    files_frame, files_update = create_files_tab(left_panel, lambda name: events.select_file(name))
    files_frame.pack(fill='both', expand=True)
    analyze_btn = ttk.Button(left_panel, text='Analyze & Synthesize')
    analyze_btn.pack(fill='x', pady=(5, 0))

    resp_widgets = create_response_tab(right_panel)
    resp_widgets['frame'].pack(fill='both', expand=True)

    events = UIEvents(app, config, engine, state, resp_widgets, files_update, status_bar, analyze_btn)
    upload_btn.config(command=events.add_files)
    folder_btn.config(command=events.add_folder)
    clear_btn.config(command=events.clear_all)

    app.mainloop()


__all__ = ['launch_ui']
