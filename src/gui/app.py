import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from tkinter.scrolledtext import ScrolledText
import threading

from mp3scan.analysis import analyze_file
from mp3scan.player import Preview


def format_stats(info: dict) -> str:
    if not info["valid"]:
        return f"{info.get('path', '?')}: no MPEG-1 Layer III frames found ({info['size_bytes']:,} bytes)"
    mode = "VBR" if info["vbr"] else "CBR"
    line = (
        f"{info.get('path', '?')}: frames={info['frame_count']:,} "
        f"sr={info['sample_rate']}Hz stereo={info['stereo']} "
        f"bitrate={info['avg_bitrate_kbps']:.1f}kbps ({mode}) "
        f"duration={info['duration_sec']:.2f}s"
    )
    if info["audio_offset"]:
        line += f" id3={info['audio_offset']:,}B"
    if "decoded_duration_sec" in info:
        dec = info["decoded_duration_sec"]
        line += " decoder=" + ("unavailable" if dec is None else f"{dec:.2f}s")
    return line


class App(tk.Tk):
    def __init__(self):
        super().__init__()
        self.title("MP3 Frame Counter")
        self.geometry("900x560")
        self.preview = Preview()
        self.file_var = tk.StringVar()
        self.verify_var = tk.BooleanVar(value=False)
        self._build()

    def _setup_style(self):
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass
        style.configure("Title.TLabel", font=("Segoe UI", 16, "bold"))
        style.configure("Sub.TLabel", font=("Segoe UI", 10))
        style.configure("Accent.TButton", font=("Segoe UI", 10, "bold"))
        style.configure("Card.TFrame", padding=10)

    def _build(self):
        self._setup_style()

        header = ttk.Frame(self, style="Card.TFrame")
        header.pack(fill="x", padx=8, pady=(8, 0))
        ttk.Label(header, text="MP3 Frame Counter", style="Title.TLabel").pack(side="left")
        ttk.Label(header, text="MPEG-1 Layer III frames, duration estimate", style="Sub.TLabel").pack(side="left", padx=12)

        f = ttk.Frame(self, style="Card.TFrame")
        f.pack(fill="x", padx=8, pady=(4, 6))
        pad = dict(padx=6, pady=4, sticky="w")

        ttk.Label(f, text="MP3 file:").grid(row=0, column=0, **pad)
        ttk.Entry(f, textvariable=self.file_var, width=60).grid(row=0, column=1, **pad)
        ttk.Button(f, text="Browse...", command=self._pick_file).grid(row=0, column=2, **pad)
        ttk.Button(f, text="▶ Play", command=self._play).grid(row=0, column=3, **pad)
        ttk.Button(f, text="■ Stop", command=self._stop).grid(row=0, column=4, **pad)

        ttk.Checkbutton(f, text="Verify with decoder (ffmpeg)", variable=self.verify_var).grid(row=1, column=1, **pad)
        self.btn_analyze = ttk.Button(f, text="Analyze", command=self._analyze, style="Accent.TButton")
        self.btn_analyze.grid(row=1, column=0, **pad)
        f.grid_columnconfigure(1, weight=1)

        ttk.Separator(self, orient="horizontal").pack(fill="x", padx=8, pady=(2, 4))
        self.log = ScrolledText(self, height=20, font=("Consolas", 10), wrap="word")
        self.log.pack(fill="both", expand=True, padx=8, pady=(0, 6))

    def _pick_file(self):
        fn = filedialog.askopenfilename(title="Pick MP3", filetypes=[("MP3", "*.mp3"), ("All files", "*.*")])
        if fn: self.file_var.set(fn)

    def _log(self, msg: str):
        self.log.insert("end", msg + "\n")
        self.log.see("end")

    def _analyze(self):
        path = self.file_var.get().strip()
        verify = self.verify_var.get()
        if not path:
            messagebox.showwarning("Missing", "Please choose an MP3 file."); return
        def task():
            self.after(0, lambda: self.btn_analyze.configure(state="disabled"))
            try:
                info = analyze_file(path, verify=verify)
                self.after(0, lambda msg=format_stats(info): self._log(msg))
            except Exception as e:
                error_msg = str(e)
                self.after(0, lambda msg=error_msg: messagebox.showerror("Analyze", msg))
            finally:
                self.after(0, lambda: self.btn_analyze.configure(state="normal"))
        threading.Thread(target=task, daemon=True).start()

    def _play(self):
        path = self.file_var.get().strip()
        if not path:
            messagebox.showwarning("Play", "Please choose an MP3 file."); return
        def task():
            try:
                self.preview.play(path)
            except Exception as e:
                # decoder or audio device failure
                error_msg = str(e)
                self.after(0, lambda msg=error_msg: messagebox.showerror("Play", msg))
        threading.Thread(target=task, daemon=True).start()

    def _stop(self):
        self.preview.stop()

def main():
    App().mainloop()

if __name__ == "__main__":
    main()
