"""Which tape regions carry display line numbers."""

from __future__ import annotations

from enum import IntFlag


class Numbering(IntFlag):
    NONE = 0
    BANNER = 1
    LEADER = 2
    CODE = 4
    TRAILER = 8
    ALL = BANNER | LEADER | CODE | TRAILER

    @classmethod
    def parse(cls, names: str | list[str] | None) -> Numbering:
        """Build a flag set from names such as ``"code,trailer"``.

        Raises
        ------
        ValueError
            On an unknown region name.
        """
        if names is None:
            return cls.NONE
        if isinstance(names, str):
            names = [n for n in names.split(",") if n.strip()]
        flags = cls.NONE
        for name in names:
            key = name.strip().upper()
            if key not in cls.__members__:
                raise ValueError(f"Unknown numbering region: {name!r}")
            flags |= cls[key]
        return flags
