import tkinter as tk
from tkinter import ttk
from typing import Callable, List, Optional

from models import Document


def create_tab(parent, on_select: Callable[[str], None]):
    frame = ttk.Frame(parent)

    list_frame = ttk.LabelFrame(frame, text='Files', padding=5)
    list_frame.pack(side='left', fill='y')
    listbox = tk.Listbox(list_frame, exportselection=False, width=28)
    listbox.pack(fill='both', expand=True)

    viewer_frame = ttk.LabelFrame(frame, text='Source', padding=5)
    viewer_frame.pack(side='left', fill='both', expand=True, padx=(5, 0))
    viewer = tk.Text(viewer_frame, wrap='none', state='disabled')
    scroll = ttk.Scrollbar(viewer_frame, orient='vertical', command=viewer.yview)
    viewer.configure(yscrollcommand=scroll.set)
    viewer.pack(side='left', fill='both', expand=True)
    scroll.pack(side='right', fill='y')

    def on_listbox(_event):
        picked = listbox.curselection()
        if picked:
            on_select(listbox.get(picked[0]))

    listbox.bind('<<ListboxSelect>>', on_listbox)

    def update(documents: List[Document], selected: Optional[Document]):
        listbox.delete(0, tk.END)
        for idx, doc in enumerate(documents):
            listbox.insert(tk.END, doc.name)
            if selected is not None and doc.name == selected.name:
                listbox.selection_set(idx)
        viewer.configure(state='normal')
        viewer.delete('1.0', tk.END)
        if selected is not None:
            viewer.insert('1.0', selected.content)
        else:
            viewer.insert('1.0', 'Select a file to view its content.')
        viewer.configure(state='disabled')

    return frame, update


__all__ = ['create_tab']
