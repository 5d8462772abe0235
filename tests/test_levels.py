"""Tests for petti.core.levels – layouts, validation and YAML loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from petti.core.errors import OutOfRangeError
from petti.core.levels import LevelCatalog, LevelDefinition, Position, parse_layout


SMALL = """
######
#@   #
# $ .#
#    #
######
"""


def _level(level_id: int = 1, **overrides) -> LevelDefinition:
    fields = dict(
        id=level_id,
        name=f"Level {level_id}",
        width=5,
        height=5,
        player_start=Position(1, 1),
        crates=(Position(2, 2),),
        targets=frozenset({Position(3, 2)}),
        walls=frozenset({Position(0, 0)}),
    )
    fields.update(overrides)
    return LevelDefinition(**fields)


def _write_level(d: Path, stem: str, level_id: int, name: str, layout: str) -> None:
    body = textwrap.indent(textwrap.dedent(layout).strip("\n"), "  ")
    (d / f"{stem}.yaml").write_text(f"id: {level_id}\nname: {name}\nlayout: |\n{body}\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# Position
# ---------------------------------------------------------------------------

class TestPosition:
    def test_structural_equality(self):
        assert Position(2, 3) == Position(2, 3)
        assert Position(2, 3) != Position(3, 2)

    def test_hashable(self):
        assert len({Position(1, 1), Position(1, 1), Position(0, 1)}) == 2

    def test_offset(self):
        assert Position(2, 2).offset(1, -1) == Position(3, 1)


# ---------------------------------------------------------------------------
# parse_layout
# ---------------------------------------------------------------------------

class TestParseLayout:
    def test_basic_fields(self):
        level = parse_layout(7, "Small", SMALL)
        assert level.id == 7
        assert level.name == "Small"
        assert (level.width, level.height) == (6, 5)
        assert level.player_start == Position(1, 1)
        assert level.crates == (Position(2, 2),)
        assert level.targets == frozenset({Position(4, 2)})

    def test_walls_form_border(self):
        level = parse_layout(1, "Small", SMALL)
        assert Position(0, 0) in level.walls
        assert Position(5, 4) in level.walls
        assert Position(1, 1) not in level.walls
        assert len(level.walls) == 2 * 6 + 2 * 3

    def test_crates_numbered_in_reading_order(self):
        level = parse_layout(1, "Order", "#####\n#@ $#\n#$ .#\n# . #\n#####")
        assert level.crates == (Position(3, 1), Position(1, 2))

    def test_crate_and_player_on_target(self):
        level = parse_layout(1, "Marks", "#####\n#+*$#\n#   #\n#####")
        assert level.player_start == Position(1, 1)
        assert level.targets == frozenset({Position(1, 1), Position(2, 1)})
        assert level.crates == (Position(2, 1), Position(3, 1))

    def test_short_rows_padded(self):
        level = parse_layout(1, "Ragged", "######\n#@$.#\n####")
        assert level.width == 6
        assert level.height == 3

    def test_alternate_floor_chars(self):
        level = parse_layout(1, "Dashes", "#####\n#@-$.#\n#___#\n#####")
        assert level.crates == (Position(3, 1),)

    def test_unknown_char(self):
        with pytest.raises(ValueError, match="unknown layout character"):
            parse_layout(1, "Bad", "####\n#@X#\n####")

    def test_missing_player(self):
        with pytest.raises(ValueError, match="no player"):
            parse_layout(1, "Bad", "#####\n# $.#\n#####")

    def test_two_players(self):
        with pytest.raises(ValueError, match="more than one player"):
            parse_layout(1, "Bad", "#####\n#@@$.#\n#####")

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            parse_layout(1, "Bad", "\n   \n")

    def test_crate_target_mismatch(self):
        with pytest.raises(ValueError, match="2 crates but 1 targets"):
            parse_layout(1, "Bad", "######\n#@$$.#\n######")


# ---------------------------------------------------------------------------
# LevelDefinition.validate
# ---------------------------------------------------------------------------

class TestValidate:
    def test_valid(self):
        _level().validate()

    def test_non_positive_id(self):
        with pytest.raises(ValueError, match="id must be positive"):
            _level(level_id=0).validate()

    def test_non_positive_size(self):
        with pytest.raises(ValueError, match="size must be positive"):
            _level(width=0).validate()

    def test_no_crates(self):
        with pytest.raises(ValueError, match="at least one crate"):
            _level(crates=(), targets=frozenset()).validate()

    def test_duplicate_crates(self):
        with pytest.raises(ValueError, match="share a cell"):
            _level(
                crates=(Position(2, 2), Position(2, 2)),
                targets=frozenset({Position(3, 2), Position(3, 3)}),
            ).validate()

    def test_out_of_bounds(self):
        with pytest.raises(ValueError, match="outside the grid"):
            _level(walls=frozenset({Position(5, 0)})).validate()

    def test_player_in_wall(self):
        with pytest.raises(ValueError, match="player starts inside a wall"):
            _level(walls=frozenset({Position(1, 1)})).validate()

    def test_player_on_crate(self):
        with pytest.raises(ValueError, match="player starts on a crate"):
            _level(player_start=Position(2, 2)).validate()

    def test_crate_in_wall(self):
        with pytest.raises(ValueError, match="crate sits inside a wall"):
            _level(walls=frozenset({Position(2, 2)})).validate()

    def test_target_may_overlap_player(self):
        _level(targets=frozenset({Position(1, 1)})).validate()


# ---------------------------------------------------------------------------
# LevelCatalog – lookups
# ---------------------------------------------------------------------------

class TestCatalogLookups:
    @pytest.fixture()
    def catalog(self) -> LevelCatalog:
        return LevelCatalog([_level(1), _level(2), _level(5)])

    def test_length(self, catalog: LevelCatalog):
        assert len(catalog) == 3
        assert catalog.length() == 3

    def test_get(self, catalog: LevelCatalog):
        assert catalog.get(0).id == 1
        assert catalog.get(2).id == 5

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_get_out_of_range(self, catalog: LevelCatalog, index: int):
        with pytest.raises(OutOfRangeError):
            catalog.get(index)

    def test_out_of_range_is_index_error(self, catalog: LevelCatalog):
        with pytest.raises(IndexError):
            catalog.get(3)

    def test_all_is_copy(self, catalog: LevelCatalog):
        levels = catalog.all()
        levels.clear()
        assert len(catalog) == 3

    def test_index_of(self, catalog: LevelCatalog):
        assert catalog.index_of(5) == 2

    def test_index_of_unknown(self, catalog: LevelCatalog):
        with pytest.raises(OutOfRangeError):
            catalog.index_of(4)

    def test_empty_catalog_rejected(self):
        with pytest.raises(ValueError, match="at least one level"):
            LevelCatalog([])

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="duplicate level id 1"):
            LevelCatalog([_level(1), _level(1)])

    def test_invalid_level_rejected(self):
        with pytest.raises(ValueError):
            LevelCatalog([_level(1, walls=frozenset({Position(2, 2)}))])


# ---------------------------------------------------------------------------
# LevelCatalog – YAML directory
# ---------------------------------------------------------------------------

class TestFromDirectory:
    def test_numeric_sort(self, tmp_path: Path):
        _write_level(tmp_path, "level10", 10, "Ten", SMALL)
        _write_level(tmp_path, "level2", 2, "Two", SMALL)
        _write_level(tmp_path, "level1", 1, "One", SMALL)
        catalog = LevelCatalog.from_directory(tmp_path)
        assert [level.name for level in catalog.all()] == ["One", "Two", "Ten"]

    def test_ignores_other_files(self, tmp_path: Path):
        _write_level(tmp_path, "level1", 1, "One", SMALL)
        (tmp_path / "notes.yaml").write_text("id: 9\n", encoding="utf-8")
        assert len(LevelCatalog.from_directory(tmp_path)) == 1

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            LevelCatalog.from_directory(tmp_path / "nope")

    def test_empty_directory(self, tmp_path: Path):
        with pytest.raises(ValueError, match="No level files"):
            LevelCatalog.from_directory(tmp_path)

    def test_missing_name(self, tmp_path: Path):
        (tmp_path / "level1.yaml").write_text("id: 1\nlayout: '#@$.#'\n", encoding="utf-8")
        with pytest.raises(ValueError, match="level1.yaml: missing or invalid 'name'"):
            LevelCatalog.from_directory(tmp_path)

    def test_invalid_id(self, tmp_path: Path):
        (tmp_path / "level1.yaml").write_text("id: one\nname: X\nlayout: '#@$.#'\n", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid 'id'"):
            LevelCatalog.from_directory(tmp_path)

    def test_not_a_mapping(self, tmp_path: Path):
        (tmp_path / "level1.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError, match="expected YAML"):
            LevelCatalog.from_directory(tmp_path)

    def test_bad_yaml(self, tmp_path: Path):
        (tmp_path / "level1.yaml").write_text("id: [1\n", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid YAML"):
            LevelCatalog.from_directory(tmp_path)

    def test_layout_error_names_file(self, tmp_path: Path):
        _write_level(tmp_path, "level3", 3, "Broken", "#####\n# $.#\n#####")
        with pytest.raises(ValueError, match="level3.yaml: .*no player"):
            LevelCatalog.from_directory(tmp_path)


# ---------------------------------------------------------------------------
# Shipped levels
# ---------------------------------------------------------------------------

class TestShippedLevels:
    @pytest.fixture()
    def catalog(self) -> LevelCatalog:
        return LevelCatalog.from_directory()

    def test_three_levels(self, catalog: LevelCatalog):
        assert [level.name for level in catalog.all()] == [
            "First Steps",
            "Around the Corner",
            "Tight Squeeze",
        ]

    def test_first_level_geometry(self, catalog: LevelCatalog):
        level = catalog.get(0)
        assert (level.width, level.height) == (8, 6)
        assert level.player_start == Position(1, 1)
        assert level.crates == (Position(2, 2), Position(3, 2))
        assert level.targets == frozenset({Position(5, 2), Position(6, 2)})

    def test_crate_counts(self, catalog: LevelCatalog):
        assert [len(level.crates) for level in catalog.all()] == [2, 3, 4]
