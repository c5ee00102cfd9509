from pathlib import Path

import pytest

from fluidbrush.model.io import DataLoadError, load_particles, parse_rows

HEADER = "Points0,Points1,Points2,velocity0,velocity1,velocity2,concentration"


def write_csv(path: Path, lines: list[str]) -> str:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def test_load_valid_file(tmp_path: Path) -> None:
    filepath = write_csv(tmp_path / "particles.csv", [
        HEADER,
        "0.0,1.0,2.0,0.1,0.2,0.3,4.5",
        "1.0,1.5,2.5,0.0,0.0,0.0,0.0",
    ])

    particles = load_particles(filepath)

    assert len(particles) == 2
    assert list(particles.ids) == [0, 1]
    record = particles.record(0)
    assert record.position == (0.0, 1.0, 2.0)
    assert record.velocity == pytest.approx((0.1, 0.2, 0.3))
    assert record.concentration == 4.5


def test_semicolon_and_extra_columns(tmp_path: Path) -> None:
    filepath = write_csv(tmp_path / "particles.csv", [
        "id;" + HEADER.replace(",", ";") + ";temperature",
        "a;0;0;0;1;1;1;2,5;300",
    ])

    particles = load_particles(filepath)

    assert len(particles) == 1
    assert particles.concentration[0] == 2.5


def test_malformed_rows_are_skipped(tmp_path: Path, caplog) -> None:
    filepath = write_csv(tmp_path / "particles.csv", [
        HEADER,
        "0,0,0,0,0,0,1",
        "0,0,abc,0,0,0,1",
        "0,0,0,0,0,0,-1",
        "0,0,0,0,0,0,nan",
        "0,0,0,0,0",
        "1,1,1,1,1,1,2",
    ])

    with caplog.at_level("WARNING"):
        particles = load_particles(filepath)

    # ids follow the file rows, so rejected rows leave gaps
    assert list(particles.ids) == [0, 5]
    assert "Rejected 4 malformed record(s)" in caplog.text


def test_missing_column(tmp_path: Path) -> None:
    filepath = write_csv(tmp_path / "particles.csv", [
        "Points0,Points1,Points2,concentration",
        "0,0,0,1",
    ])
    with pytest.raises(DataLoadError, match="velocity0"):
        load_particles(filepath)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_particles(str(tmp_path / "nope.csv"))


def test_empty_file_has_no_header(tmp_path: Path) -> None:
    filepath = tmp_path / "empty.csv"
    filepath.write_text("", encoding="utf-8")
    with pytest.raises(DataLoadError):
        load_particles(str(filepath))


def test_data_load_error_is_a_value_error() -> None:
    assert issubclass(DataLoadError, ValueError)


def test_parse_rows_without_rows() -> None:
    particles, rejected = parse_rows([])
    assert len(particles) == 0
    assert rejected == 0
