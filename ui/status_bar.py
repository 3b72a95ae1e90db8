import tkinter as tk


class StatusBar:
    def __init__(self, root):
        self.status_var = tk.StringVar(value='Ready')
        self.tokens_var = tk.StringVar()
        frame = tk.Frame(root)
        frame.pack(side='bottom', fill='x')
        tk.Label(frame, textvariable=self.status_var).pack(side='left', padx=10)
        tk.Label(frame, textvariable=self.tokens_var).pack(side='right', padx=10)

    def set_status(self, text: str):
        self.status_var.set(text)

    def set_prompt_tokens(self, tokens: int, model: str):
        self.tokens_var.set(f"Estimated prompt tokens: {tokens} ({model})")


__all__ = ['StatusBar']
