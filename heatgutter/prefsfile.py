# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HeatGutter, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os

from heatgutter.qt import *

logger = logging.getLogger(__name__)


class PrefsFile:
    """
    Base class for dataclasses that persist their public fields to a JSON file.

    Fields whose name starts with an underscore are never saved.
    """

    _filename = ""
    _allowMakeDirs = True
    _dirty = False

    def __post_init__(self):
        self._dirty = False

    def getParentDir(self) -> str:
        return QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppConfigLocation)

    def fullPath(self) -> str:
        assert self._filename, "PrefsFile subclass must set _filename"
        return os.path.join(self.getParentDir(), self._filename)

    def setDirty(self):
        self._dirty = True

    def isDirty(self) -> bool:
        return self._dirty

    def reset(self):
        for field in dataclasses.fields(self):
            if field.default_factory is not dataclasses.MISSING:
                value = field.default_factory()
            else:
                value = field.default
            setattr(self, field.name, value)
        self._dirty = False

    def load(self) -> bool:
        path = self.fullPath()

        try:
            with open(path, encoding="utf-8") as f:
                obj = json.load(f)
        except FileNotFoundError:
            return False

        if not isinstance(obj, dict):
            logger.warning(f"{self._filename}: expected a JSON object, ignoring file")
            return False

        self.loadDict(obj)
        self._dirty = False
        return True

    def loadDict(self, obj: dict):
        fields = {f.name: f for f in dataclasses.fields(self) if not f.name.startswith("_")}

        for key, value in obj.items():
            try:
                field = fields[key]
            except KeyError:
                logger.warning(f"{self._filename}: ignoring unknown key '{key}'")
                continue

            try:
                value = self._coerce(field, value)
            except (TypeError, ValueError):
                logger.warning(f"{self._filename}: ignoring bad value for '{key}': {value!r}")
                continue

            setattr(self, key, value)

    def _coerce(self, field: dataclasses.Field, value):
        default = getattr(type(self), field.name, None)
        fieldType = type(default) if default is not None else None

        if isinstance(default, enum.Enum):
            return fieldType(value)
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError("expected bool")
            return value
        elif isinstance(default, (int, str)):
            if type(value) is not fieldType:
                raise TypeError(f"expected {fieldType.__name__}")
            return value
        else:
            return value

    def toDict(self) -> dict:
        obj = {}
        for field in dataclasses.fields(self):
            if field.name.startswith("_"):
                continue
            value = getattr(self, field.name)
            if isinstance(value, enum.Enum):
                value = value.value
            obj[field.name] = value
        return obj

    def write(self, force=False) -> str:
        if not force and not self._dirty:
            return ""

        parentDir = self.getParentDir()
        if self._allowMakeDirs:
            os.makedirs(parentDir, exist_ok=True)

        path = self.fullPath()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.toDict(), f, indent="\t")

        logger.info(f"Wrote {path}")
        self._dirty = False
        return path
