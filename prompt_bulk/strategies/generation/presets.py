"""Preset resolution: turns preset ids or custom variables into value-lists."""

import logging

from prompt_bulk.interfaces.generation import NotFoundError, ValidationError, VariableSource
from prompt_bulk.interfaces.store import BasePresetStore

logger = logging.getLogger(__name__)

PRESET_DELIMITER = ";"
CUSTOM_DELIMITER = ","


def _split(raw: str, delimiter: str) -> list[str]:
    return [piece.strip() for piece in raw.split(delimiter) if piece.strip()]


def split_preset_values(raw: str) -> list[str]:
    """Split a preset value-string on semicolons.

    Commas are allowed inside a value. Pieces are trimmed and empty pieces
    dropped::

        split_preset_values("red, bright;blue;green")
        # => ["red, bright", "blue", "green"]
    """
    return _split(raw or "", PRESET_DELIMITER)


def split_custom_values(raw: str) -> list[str]:
    """Split comma-separated custom variable input into values."""
    return _split(raw or "", CUSTOM_DELIMITER)


class PresetResolver:
    """Resolves a variable source into a mapping of placeholder to values.

    Args:
        preset_store: Store used to look up presets by id.
    """

    def __init__(self, preset_store: BasePresetStore) -> None:
        self._presets = preset_store

    async def resolve(self, source: VariableSource) -> dict[str, list[str]]:
        """Build the value-lists for one generation request.

        Args:
            source: Preset ids or custom variables. Exactly one must be non-empty.

        Returns:
            Mapping from placeholder name to its ordered values.

        Raises:
            ValidationError: If neither or both sources are given, or a preset
                has no usable values.
            NotFoundError: If a preset id does not exist.
        """
        has_presets = bool(source.preset_ids)
        has_custom = bool(source.custom_variables)

        if has_presets and has_custom:
            raise ValidationError(
                "Provide either variablePresetIds or customVariables, not both",
                missing=["variablePresetIds", "customVariables"],
            )
        if not has_presets and not has_custom:
            raise ValidationError(
                "Either variablePresetIds or customVariables must be provided",
                missing=["variablePresetIds", "customVariables"],
            )

        if has_presets:
            return await self._resolve_presets(source.preset_ids)
        return self._resolve_custom(source.custom_variables)

    async def _resolve_presets(self, preset_ids: list[str]) -> dict[str, list[str]]:
        value_lists: dict[str, list[str]] = {}
        for preset_id in preset_ids:
            preset = await self._presets.get_preset(preset_id)
            if preset is None:
                logger.warning(f"Variable preset not found: {preset_id}")
                raise NotFoundError(
                    f"Variable preset with ID {preset_id} not found",
                    ids=[preset_id],
                )

            values = split_preset_values(preset.values)
            if not values:
                raise ValidationError(
                    f'Variable preset "{preset.name}" has no valid values',
                    missing=[preset.name],
                )

            # Later presets for the same placeholder win
            value_lists[preset.placeholder] = values
            logger.debug(f"Resolved preset {preset_id} -> {preset.placeholder}: {len(values)} values")

        return value_lists

    @staticmethod
    def _resolve_custom(custom_variables: dict[str, list[str]]) -> dict[str, list[str]]:
        return {
            name.strip(): [value.strip() for value in values if value and value.strip()]
            for name, values in custom_variables.items()
        }
