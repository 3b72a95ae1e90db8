import tkinter as tk
from tkinter import ttk
from typing import Optional

from models import ArchitecturalStyle, DocumentationLevel, Preferences

DOCUMENTATION_OPTIONS = [
    (DocumentationLevel.MINIMAL, 'Minimal'),
    (DocumentationLevel.STANDARD, 'Standard Docstrings'),
    (DocumentationLevel.EXTENSIVE, 'Extensive Explanations'),
]
ARCHITECTURE_OPTIONS = [
    (ArchitecturalStyle.AUTO, 'Auto-Detect'),
    (ArchitecturalStyle.OOP, 'Object-Oriented'),
    (ArchitecturalStyle.FUNCTIONAL, 'Functional'),
    (ArchitecturalStyle.PROCEDURAL, 'Procedural'),
]


class QuestionnaireDialog:
    """Modal form collecting the synthesis preferences."""

    def __init__(self, parent):
        self.result: Optional[Preferences] = None
        self.top = tk.Toplevel(parent)
        self.top.title('Synthesis Preferences')
        self.top.transient(parent)
        self.top.resizable(False, False)

        body = ttk.Frame(self.top, padding=15)
        body.pack(fill='both', expand=True)
        ttk.Label(body, text='Help the model tailor the output by describing your goals.').pack(anchor='w', pady=(0, 10))

        ttk.Label(body, text='Primary Objective *').pack(anchor='w')
        self.objective_var = tk.StringVar()
        objective = ttk.Entry(body, textvariable=self.objective_var, width=60)
        objective.pack(fill='x', pady=(0, 8))

        ttk.Label(body, text='Essential Libraries').pack(anchor='w')
        self.libraries_var = tk.StringVar()
        ttk.Entry(body, textvariable=self.libraries_var, width=60).pack(fill='x', pady=(0, 8))

        self.documentation_var = tk.StringVar(value=DocumentationLevel.STANDARD.value)
        self._radio_group(body, 'Documentation Level', self.documentation_var, DOCUMENTATION_OPTIONS)
        self.architecture_var = tk.StringVar(value=ArchitecturalStyle.AUTO.value)
        self._radio_group(body, 'Architectural Style', self.architecture_var, ARCHITECTURE_OPTIONS)

        self.error_var = tk.StringVar()
        ttk.Label(body, textvariable=self.error_var, foreground='red').pack(anchor='w')
        buttons = ttk.Frame(body)
        buttons.pack(fill='x', pady=(10, 0))
        ttk.Button(buttons, text='Start Analysis', command=self._submit).pack(side='right')
        ttk.Button(buttons, text='Cancel', command=self.top.destroy).pack(side='right', padx=5)

        self.top.bind('<Return>', lambda _e: self._submit())
        self.top.bind('<Escape>', lambda _e: self.top.destroy())
        objective.focus_set()
        self.top.grab_set()

    @staticmethod
    def _radio_group(parent, label, var, options):
        group = ttk.LabelFrame(parent, text=label, padding=5)
        group.pack(fill='x', pady=4)
        for value, text in options:
            ttk.Radiobutton(group, text=text, value=value.value, variable=var).pack(side='left', padx=4)

    def _submit(self):
        objective = self.objective_var.get().strip()
        if not objective:
            self.error_var.set('Please describe the primary objective.')
            return
        self.result = Preferences(
            objective=objective,
            libraries=self.libraries_var.get().strip(),
            documentation=DocumentationLevel(self.documentation_var.get()),
            architecture=ArchitecturalStyle(self.architecture_var.get()),
        )
        self.top.destroy()

    def show(self) -> Optional[Preferences]:
        self.top.wait_window()
        return self.result


__all__ = ['QuestionnaireDialog']
