"""Audio playback state and the game's sound settings."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Optional

INVALID_AUDIO_ID = -1


class AudioState(Enum):
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class AudioTrack:
    path: str
    loop: bool
    volume: float
    state: AudioState = AudioState.PLAYING


class AudioEngine:
    """Keeps track of the clips being played."""

    def __init__(self) -> None:
        self.tracks: dict[int, AudioTrack] = {}
        self._ids = itertools.count()

    def play2d(self, path: str, loop: bool = False, volume: float = 1.0) -> int:
        audio_id = next(self._ids)
        self.tracks[audio_id] = AudioTrack(path, loop, volume)
        return audio_id

    def set_volume(self, audio_id: int, volume: float) -> None:
        track = self.tracks.get(audio_id)
        if track is not None:
            track.volume = volume

    def stop(self, audio_id: int) -> None:
        self.tracks.pop(audio_id, None)

    def stop_all(self) -> None:
        self.tracks.clear()

    def pause_all(self) -> None:
        for track in self.tracks.values():
            if track.state is AudioState.PLAYING:
                track.state = AudioState.PAUSED

    def resume_all(self) -> None:
        for track in self.tracks.values():
            if track.state is AudioState.PAUSED:
                track.state = AudioState.PLAYING


class SoundManager:
    """Background music and effects, with a global sound switch."""

    def __init__(self, engine: Optional[AudioEngine] = None) -> None:
        self.engine = engine if engine is not None else AudioEngine()
        self.background_music_volume = 1.0
        self.effect_volume = 1.0
        self.background_music_id = INVALID_AUDIO_ID
        self._sound_on = True

    @property
    def sound_on(self) -> bool:
        return self._sound_on

    def set_sound(self, on: bool) -> None:
        if on:
            self.engine.resume_all()
            self.set_background_music_volume(1)
        else:
            self.engine.pause_all()
        self._sound_on = on

    def set_background_music_volume(self, volume: float) -> None:
        self.background_music_volume = volume
        self.engine.set_volume(self.background_music_id, volume)

    def set_effect_volume(self, volume: float) -> None:
        self.effect_volume = volume

    def play_background_music(self, path: str) -> int:
        self.background_music_id = self.engine.play2d(
            path, True, self.background_music_volume
        )
        if not self._sound_on:
            self.set_background_music_volume(0)
        return self.background_music_id

    def play_effect(self, path: str) -> Optional[int]:
        """Play an effect once; nothing is played while sound is off."""
        if not self._sound_on:
            return None
        return self.engine.play2d(path, False, self.effect_volume)

    def stop_background_music(self) -> None:
        self.engine.stop(self.background_music_id)

    def stop_all(self) -> None:
        self.engine.stop_all()