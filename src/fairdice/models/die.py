"""Die model — an immutable ordered sequence of integer faces."""

from __future__ import annotations

from dataclasses import dataclass

from fairdice.errors import InvalidArgument


MIN_FACES = 3


@dataclass(frozen=True)
class Die:
    """A die with at least three integer faces.

    Faces are stored as a tuple so the die cannot change after
    construction. The game layer may require more faces (six by default).
    """
    faces: tuple[int, ...]

    def __post_init__(self) -> None:
        faces = tuple(self.faces)
        if len(faces) < MIN_FACES:
            raise InvalidArgument(
                f"A die needs at least {MIN_FACES} faces, got {len(faces)}"
            )
        for face in faces:
            if isinstance(face, bool) or not isinstance(face, int):
                raise InvalidArgument(f"Die faces must be integers, got {face!r}")
        object.__setattr__(self, "faces", faces)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def face(self, index: int) -> int:
        """Face value at a fair-roll index in ``[0, face_count)``."""
        if not 0 <= index < len(self.faces):
            raise InvalidArgument(
                f"Face index {index} out of range 0..{len(self.faces) - 1}"
            )
        return self.faces[index]

    def __str__(self) -> str:
        return "[" + ",".join(str(f) for f in self.faces) + "]"
