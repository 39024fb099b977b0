#!/usr/bin/env python3
"""
Interval Timer - run/walk intervals per day
Features: Date-keyed interval lists, countdown with beep on each change, saved locally
"""

import tkinter as tk
from tkinter import ttk
from datetime import datetime, timedelta

from .config import ConfigManager
from .countdown import CountdownLogic, RUNNING, PAUSED, COMPLETE, CUE_NAME, format_clock
from .sound import SoundManager, TONES
from .store import IntervalStore, INTERVAL_KINDS, DATE_FORMAT, date_key

THEMES = {
    "Matrix": {"bg": "#000000", "fg": "#00FF00", "accent": "#008800"},
    "Cyber": {"bg": "#0a0a0a", "fg": "#00d4ff", "accent": "#0080ff"},
    "Ocean": {"bg": "#001a33", "fg": "#00ffff", "accent": "#0099cc"},
}


class IntervalTimerApp:
    def __init__(self, root, config=None):
        self.root = root
        self.root.title("Interval Timer")

        # Managers
        self.config = config or ConfigManager()
        self.sound_mgr = SoundManager()
        self.store = IntervalStore(self.config.data_file)
        self.store.load()

        self.current_sound = self.config.get("sound")
        if self.current_sound in TONES:
            self.sound_mgr.set_tone(CUE_NAME, self.current_sound)

        self.countdown = CountdownLogic(
            self.store,
            scheduler=self.root,
            play_cue=self.sound_mgr.play_cue,
            tick_ms=self.config.get("tick_ms"),
            reset_clears_intervals=self.config.get("reset_clears_intervals"),
            on_update=self.on_countdown_update,
            on_interval_change=self.on_interval_change,
            on_complete=self.on_complete,
        )

        self.interval_widgets = []

        self.root.geometry("380x560")
        self.root.resizable(False, False)
        self._setup_ui()
        self._setup_keybindings()
        self._apply_theme()
        self._select_date(self._initial_date())

    def _initial_date(self):
        last = self.config.get("last_date")
        if last:
            try:
                return date_key(last)
            except (TypeError, ValueError) as e:
                print(f"Last date error: {e}")
        return date_key()

    def _setup_ui(self):
        main = tk.Frame(self.root)
        main.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)

        # Top bar
        top = tk.Frame(main)
        top.pack(fill=tk.X, pady=(0, 6))

        self.theme_var = tk.StringVar(value=self.config.get("theme"))
        if self.theme_var.get() not in THEMES:
            self.theme_var.set("Matrix")
        ttk.Combobox(top, textvariable=self.theme_var, values=list(THEMES.keys()),
                     width=7, state="readonly", font=('Arial', 8)).pack(side=tk.LEFT, padx=2)
        self.theme_var.trace_add('write', lambda *a: self._change_theme())

        self.sound_var = tk.StringVar(value=self.current_sound)
        ttk.Combobox(top, textvariable=self.sound_var, values=list(TONES.keys()),
                     width=7, state="readonly", font=('Arial', 8)).pack(side=tk.LEFT, padx=2)
        self.sound_var.trace_add('write', lambda *a: self._change_sound())

        # Date selector
        tk.Label(main, text="Select Date", font=('Arial', 11, 'bold')).pack()

        date_f = tk.Frame(main)
        date_f.pack(pady=4)

        tk.Button(date_f, text="◀", command=lambda: self._shift_date(-1),
                  font=('Arial', 10), relief='flat', padx=6).pack(side=tk.LEFT)
        self.date_var = tk.StringVar()
        self.date_entry = tk.Entry(date_f, textvariable=self.date_var, width=11,
                                   font=('Arial', 12), justify='center')
        self.date_entry.pack(side=tk.LEFT, padx=4)
        self.date_entry.bind('<Return>', lambda e: self._select_date(self.date_var.get()))
        tk.Button(date_f, text="▶", command=lambda: self._shift_date(1),
                  font=('Arial', 10), relief='flat', padx=6).pack(side=tk.LEFT)
        tk.Button(date_f, text="Today", command=lambda: self._select_date(date_key()),
                  font=('Arial', 8), relief='flat', padx=6).pack(side=tk.LEFT, padx=4)

        saved_f = tk.Frame(main)
        saved_f.pack()
        tk.Label(saved_f, text="Saved days:", font=('Arial', 8)).pack(side=tk.LEFT, padx=2)
        self.saved_var = tk.StringVar()
        self.saved_box = ttk.Combobox(saved_f, textvariable=self.saved_var, width=11,
                                      state="readonly", font=('Arial', 8))
        self.saved_box.pack(side=tk.LEFT)
        self.saved_box.bind('<<ComboboxSelected>>', lambda e: self._select_date(self.saved_var.get()))

        # Add interval
        tk.Label(main, text="Add Interval", font=('Arial', 11, 'bold')).pack(pady=(8, 0))

        add_f = tk.Frame(main)
        add_f.pack(pady=4)

        self.kind_var = tk.StringVar(value=self.config.get("default_kind"))
        ttk.Combobox(add_f, textvariable=self.kind_var, values=list(INTERVAL_KINDS),
                     width=6, state="readonly", font=('Arial', 10)).pack(side=tk.LEFT, padx=2)

        self.duration_entry = tk.Entry(add_f, width=6, font=('Arial', 10), justify='center')
        self.duration_entry.pack(side=tk.LEFT, padx=2)
        self.duration_entry.insert(0, self.config.get("default_duration"))
        self.duration_entry.bind('<Return>', lambda e: self._add_interval())
        tk.Label(add_f, text="sec", font=('Arial', 8)).pack(side=tk.LEFT)

        tk.Button(add_f, text="+ Add", command=self._add_interval,
                  font=('Arial', 9), relief='flat', padx=8, pady=2).pack(side=tk.LEFT, padx=4)

        # Interval list (scrollable)
        list_frame = tk.Frame(main)
        list_frame.pack(fill=tk.BOTH, expand=True, pady=4)

        canvas = tk.Canvas(list_frame, height=160, highlightthickness=0)
        scrollbar = ttk.Scrollbar(list_frame, orient="vertical", command=canvas.yview)
        self.interval_list_frame = tk.Frame(canvas)

        self.interval_list_frame.bind(
            "<Configure>",
            lambda e: canvas.configure(scrollregion=canvas.bbox("all"))
        )

        canvas.create_window((0, 0), window=self.interval_list_frame, anchor="nw")
        canvas.configure(yscrollcommand=scrollbar.set)

        canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

        self.summary_lbl = tk.Label(main, font=('Arial', 9))
        self.summary_lbl.pack()

        # Countdown display
        self.countdown_lbl = tk.Label(main, text="00:00", font=('Arial', 40, 'bold'))
        self.countdown_lbl.pack(pady=(6, 0))

        self.status_lbl = tk.Label(main, text="", font=('Arial', 11, 'bold'))
        self.status_lbl.pack()

        # Controls
        btn_f = tk.Frame(main)
        btn_f.pack(pady=8)

        self.start_btn = tk.Button(btn_f, text="▶ Start", command=self._toggle,
                                   font=('Arial', 10, 'bold'), relief='flat', padx=14, pady=4)
        self.start_btn.pack(side=tk.LEFT, padx=4)

        tk.Button(btn_f, text="⟲ Reset", command=self._reset,
                  font=('Arial', 10), relief='flat', padx=12, pady=4).pack(side=tk.LEFT, padx=4)

    def _setup_keybindings(self):
        self.root.bind('<space>', lambda e: self._key_space(e))
        self.root.protocol('WM_DELETE_WINDOW', self._on_close)

    def _on_close(self):
        self.countdown.pause()
        self.sound_mgr.stop()
        self.root.destroy()

    def _key_space(self, event):
        # Entries and buttons handle space themselves
        if isinstance(event.widget, (tk.Entry, tk.Button, ttk.Combobox)):
            return
        self._toggle()

    # ---- date selection ----

    def _select_date(self, value):
        try:
            key = date_key(value)
        except ValueError:
            self.date_var.set(self.countdown.date_key)
            return

        self.countdown.select(key)
        self.date_var.set(key)
        self.config.set("last_date", key)
        self._refresh_intervals()

    def _shift_date(self, days):
        current = datetime.strptime(self.countdown.date_key, DATE_FORMAT)
        self._select_date(current + timedelta(days=days))

    # ---- interval list ----

    def _add_interval(self):
        key = self.countdown.date_key
        if self.store.add(key, self.kind_var.get(), self.duration_entry.get()) is None:
            return
        self._refresh_intervals()

    def _delete_interval(self, record_id):
        self.store.remove(self.countdown.date_key, record_id)
        self._refresh_intervals()

    def _refresh_intervals(self):
        for widget in self.interval_widgets:
            widget.destroy()
        self.interval_widgets = []

        records = self.store.get(self.countdown.date_key)
        for record in records:
            f = tk.Frame(self.interval_list_frame)
            f.pack(fill=tk.X, pady=1)
            tk.Label(f, text=record.label(), font=('Arial', 10)).pack(side=tk.LEFT, padx=4)
            tk.Button(f, text="×", command=lambda rid=record.id: self._delete_interval(rid),
                      font=('Arial', 10), relief='flat', padx=4).pack(side=tk.RIGHT)
            self.interval_widgets.append(f)

        total = self.store.total_seconds(self.countdown.date_key)
        self.summary_lbl.config(text=f"{len(records)} intervals | {format_clock(total)}")
        self.saved_box.config(values=self.store.dates())
        self.saved_var.set(self.countdown.date_key if records else "")
        self._apply_theme()

    # ---- countdown ----

    def _toggle(self):
        self.countdown.toggle()
        self._update_controls()

    def _reset(self):
        self.countdown.reset()
        self._refresh_intervals()
        self._update_controls()

    def on_countdown_update(self, remaining, index):
        self.countdown_lbl.config(text=format_clock(remaining))
        self._update_controls()

    def on_interval_change(self, index, record):
        self._update_controls()

    def on_complete(self):
        self.status_lbl.config(text="✅ Complete!")
        self._update_controls()

    def _update_controls(self):
        state = self.countdown.state
        if state == RUNNING:
            self.start_btn.config(text="⏸ Pause")
        elif state == PAUSED:
            self.start_btn.config(text="▶ Resume")
        else:
            self.start_btn.config(text="▶ Start")

        current = self.countdown.current
        if current is not None:
            total = len(self.countdown.snapshot)
            self.status_lbl.config(text=f"{current.kind} ({self.countdown.current_index + 1}/{total})")
        elif state != COMPLETE:
            self.status_lbl.config(text="")

    # ---- settings ----

    def _change_sound(self):
        self.current_sound = self.sound_var.get()
        self.config.set("sound", self.current_sound)
        self.sound_mgr.set_tone(CUE_NAME, self.current_sound)
        self.sound_mgr.play_cue(CUE_NAME)

    def _change_theme(self):
        self.config.set("theme", self.theme_var.get())
        self._apply_theme()

    def _apply_theme(self):
        t = THEMES[self.theme_var.get()]
        self.root.configure(bg=t["bg"])

        def apply_recursive(w):
            if isinstance(w, (tk.Frame, tk.Label, tk.Canvas)):
                w.configure(bg=t["bg"])
                if isinstance(w, tk.Label):
                    w.configure(fg=t["fg"])
            elif isinstance(w, tk.Button):
                w.configure(bg=t["bg"], fg=t["fg"],
                            activebackground=t["accent"], activeforeground=t["fg"])
            elif isinstance(w, tk.Entry):
                w.configure(bg=t["bg"], fg=t["fg"], insertbackground=t["fg"])
            for child in w.winfo_children():
                apply_recursive(child)

        apply_recursive(self.root)


def main():
    root = tk.Tk()
    IntervalTimerApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
