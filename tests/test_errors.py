"""Tests for beadforge.errors — error hierarchy."""

from __future__ import annotations

import pytest

from beadforge.errors import (
    BatchAlreadyActiveError,
    BatchError,
    BeadForgeError,
    ConfigError,
    ConversionError,
    EditorError,
    EmptyPaletteError,
    InvalidImageError,
    NoActiveBatchError,
    NoActiveResultError,
    NoHistoryError,
    PaletteError,
    UnknownPaletteError,
)


class TestErrorHierarchy:
    """Verify the BeadForge error inheritance tree."""

    def test_beadforge_error_is_base(self) -> None:
        assert issubclass(BeadForgeError, Exception)

    def test_all_errors_inherit_from_base(self) -> None:
        for cls in (
            ConfigError,
            PaletteError,
            EmptyPaletteError,
            UnknownPaletteError,
            InvalidImageError,
            ConversionError,
            EditorError,
            NoActiveResultError,
            NoHistoryError,
            BatchError,
            BatchAlreadyActiveError,
            NoActiveBatchError,
        ):
            assert issubclass(cls, BeadForgeError), f"{cls.__name__} missing base"

    def test_palette_errors(self) -> None:
        assert issubclass(EmptyPaletteError, PaletteError)
        assert issubclass(UnknownPaletteError, PaletteError)

    def test_editor_errors(self) -> None:
        for cls in (NoActiveResultError, NoHistoryError, BatchError):
            assert issubclass(cls, EditorError)
        assert issubclass(BatchAlreadyActiveError, BatchError)
        assert issubclass(NoActiveBatchError, BatchError)

    def test_catch_base_catches_specific(self) -> None:
        with pytest.raises(BeadForgeError):
            raise NoHistoryError("Nothing to undo")


class TestConversionError:
    """ConversionError carries the failing stage."""

    def test_stage_attribute(self) -> None:
        err = ConversionError("bad pixels", stage="match")
        assert err.stage == "match"
        assert str(err) == "bad pixels"

    def test_stage_defaults_to_empty(self) -> None:
        assert ConversionError("oops").stage == ""

    def test_chained_cause_preserved(self) -> None:
        try:
            try:
                raise ValueError("root cause")
            except ValueError as exc:
                raise ConversionError("wrapped", stage="decode") from exc
        except ConversionError as err:
            assert isinstance(err.__cause__, ValueError)
