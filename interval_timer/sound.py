import os
from pathlib import Path

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

from .errors import PlaybackError

ASSETS_DIR = Path(__file__).resolve().parent / "assets"
ASSET_EXTENSIONS = (".wav", ".ogg", ".mp3")

# name -> (frequency Hz, duration s)
TONES = {
    "beep": (880, 0.15),
    "alert": (1200, 0.2),
    "chime": (660, 0.25),
    "bell": (1760, 0.2),
}


class SoundManager:
    """Plays short named cues through the pygame mixer"""
    def __init__(self, assets_dir=ASSETS_DIR):
        self.assets_dir = Path(assets_dir)
        self.sounds = {}
        self.cue_tones = {}
        self.available = self._init_mixer()

        if self.available:
            self._generate_sounds()

    def _init_mixer(self):
        try:
            pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
        except pygame.error as e:
            print(f"Sound init error: {e}")
            return False
        return True

    def _generate_sounds(self):
        for name, (freq, duration) in TONES.items():
            try:
                self.sounds[name] = self._create_tone(freq, duration)
            except (pygame.error, ValueError) as e:
                print(f"Sound generation error: {e}")

        # Bundled files replace the generated tone of the same name
        if not self.assets_dir.is_dir():
            return
        for path in sorted(self.assets_dir.iterdir()):
            if path.suffix.lower() not in ASSET_EXTENSIONS:
                continue
            try:
                self.sounds[path.stem] = pygame.mixer.Sound(str(path))
            except pygame.error as e:
                print(f"Sound load error: {e}")

    def _create_tone(self, freq, duration):
        sr, _, channels = pygame.mixer.get_init()
        n = int(duration * sr)
        t = np.linspace(0, duration, n, False)
        wave = np.sin(freq * t * 2 * np.pi)

        fade = int(sr * 0.01)
        wave[:fade] *= np.linspace(0, 1, fade)
        wave[-fade:] *= np.linspace(1, 0, fade)

        audio = (wave * 32767).astype(np.int16)
        if channels > 1:
            audio = np.repeat(audio.reshape(n, 1), channels, axis=1)
        return pygame.sndarray.make_sound(np.ascontiguousarray(audio))

    def set_tone(self, cue, tone):
        """Play ``tone`` whenever ``cue`` is requested"""
        if tone not in TONES:
            raise ValueError(f"unknown tone: {tone}")
        self.cue_tones[cue] = tone

    def _resolve(self, name):
        sound = self.sounds.get(self.cue_tones.get(name, name))
        if sound is None:
            raise PlaybackError(f"no sound for cue '{name}'")
        return sound

    def play_cue(self, name):
        """Fire-and-forget playback; failures are printed, never raised"""
        if not self.available:
            return False

        try:
            self._resolve(name).play()
        except (PlaybackError, pygame.error) as e:
            print(f"Play error: {e}")
            return False
        return True

    def stop(self):
        if not self.available:
            return
        try:
            pygame.mixer.stop()
        except pygame.error as e:
            print(f"Stop error: {e}")
