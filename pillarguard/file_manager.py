"""Default stats for characters and monsters, and the waves of each turn."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from .character import Character, create_character
from .monster import Monster, create_monster


class GameData:
    """The character, monster and turn tables the game is balanced by."""

    def __init__(self, characters: Any, monsters: Any, turns: Any) -> None:
        self.characters = characters
        self.monsters_table = monsters
        self.turns = turns

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "GameData":
        """Load Character.json, Monster.json and Turn.json from ``path``."""
        base = Path(path)

        def load(file_name: str) -> Any:
            with (base / file_name).open(encoding="utf-8") as handle:
                return json.load(handle)

        return cls(load("Character.json"), load("Monster.json"), load("Turn.json"))

    def character_default(self, name: str) -> Character:
        character = create_character(name)
        for entry in self.characters["Characters"]:
            if entry["Name"] == name:
                character.speed = int(entry["Speed"])
                # the starting hit points are taken from the maximum
                character.hp = int(entry["HpMax"])
                character.mp = int(entry["Mp"])
                character.mp_max = int(entry["MpMax"])
                break
        return character

    def monster_default(self, name: str) -> Monster:
        monster = create_monster(name)
        for entry in self.monsters_table["Monsters"]:
            if entry["Name"] == name:
                monster.speed = int(entry["Speed"])
                monster.attack_speed = float(entry["AttackSpeed"])
                monster.hp = int(entry["Hp"])
                monster.hp_max = int(entry["HpMax"])
                monster.damage = float(entry["Dame"])
                break
        return monster

    def turn_count(self) -> int:
        return len(self.turns["Turns"])

    def _turn(self, turn: int) -> Any:
        turns = self.turns["Turns"]
        if not 1 <= turn <= len(turns):
            raise IndexError(f"turn {turn} out of range 1..{len(turns)}")
        return turns[turn - 1]

    @staticmethod
    def _find_gate(turn_entry: Any, gate: int) -> Any:
        return next((g for g in turn_entry["Gates"] if g["Gate"] == gate), None)

    def monster_count(self, turn: int, gate: int) -> int:
        """How many monsters come through ``gate`` in ``turn`` (counted from 1)."""
        entry = self._find_gate(self._turn(turn), gate)
        if entry is None:
            return 0
        return sum(int(m["Count"]) for m in entry["Monsters"])

    def _scaled(self, name: str, percent: float) -> Monster:
        monster = self.monster_default(name)
        monster.hp = int(monster.hp + monster.hp * percent)
        monster.hp_max = int(monster.hp_max + monster.hp_max * percent)
        monster.damage = monster.damage + monster.damage * percent
        return monster

    def monster(self, turn: int, gate: int, index: int) -> Monster:
        """The ``index``-th monster of a gate's wave, strengthened by the turn's percent.

        Indices outside the wave fall back to its first kind of monster.
        """
        turn_entry = self._turn(turn)
        percent = float(turn_entry["Percent"])
        entry = self._find_gate(turn_entry, gate)
        if entry is None:
            raise KeyError(f"turn {turn} has no gate {gate}")
        kinds = entry["Monsters"]
        chosen = 0
        start = int(kinds[0]["Count"])
        for position, kind in enumerate(kinds[1:], start=1):
            end = start + int(kind["Count"])
            if start <= index < end:
                chosen = position
                break
            start = end
        return self._scaled(kinds[chosen]["Name"], percent)

    def monsters(self, turn: int) -> dict[int, list[Monster]]:
        """Every monster of a turn, grouped by gate."""
        turn_entry = self._turn(turn)
        percent = float(turn_entry["Percent"])
        waves: dict[int, list[Monster]] = {}
        for entry in turn_entry["Gates"]:
            waves[int(entry["Gate"])] = [
                self._scaled(kind["Name"], percent)
                for kind in entry["Monsters"]
                for _ in range(int(kind["Count"]))
            ]
        return waves