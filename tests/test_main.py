from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from hotspot_survey import main as cli
from hotspot_survey.lib.logging_utils import setup_debug_logging


HEADER = (
    "hotspot_id,timestamp,filt_thermal16,filt_thermal8,filt_color,x_pos,y_pos,"
    "thumb_left,thumb_top,thumb_right,thumb_bottom,hotspot_type,species_id\n"
)
ROW = (
    "{hotspot_id},20160407235833.627GMT,"
    "CHESS_FL1_C_160407_235833.627_THERM-16BIT.PNG,"
    "CHESS_FL1_C_160407_235833.627_THERM-8.PNG,"
    "{color},100,200,1,2,3,4,{hotspot_type},12\n"
)
COLOR = "CHESS_FL1_C_160407_235833.627_COLOR.JPG"


def _write_csv(tmp_path: Path, *rows: str) -> Path:
    csv_path = tmp_path / "hotspots.csv"
    csv_path.write_text(HEADER + "".join(rows), encoding="utf-8")
    return csv_path


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch):
    monkeypatch.delenv(cli.CONFIG_ENV_VAR, raising=False)


def test_main_prints_report_and_writes_exports(tmp_path: Path, capsys) -> None:
    csv_path = _write_csv(
        tmp_path,
        ROW.format(hotspot_id="a", color=COLOR, hotspot_type="Animal"),
        ROW.format(hotspot_id="b", color=COLOR, hotspot_type="Anomaly"),
    )
    annotations = tmp_path / "annotations.json"
    summary = tmp_path / "summary.json"
    filtered = tmp_path / "filtered.csv"

    exit_code = cli.main(
        [
            str(csv_path),
            "--filter",
            "hotspot_type=Animal",
            "--output",
            str(filtered),
            "--annotations",
            str(annotations),
            "--summary-json",
            str(summary),
        ]
    )

    assert exit_code == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "Total hotspots: 1" in out
    assert "  Animal: 1" in out

    annotation_payload = json.loads(annotations.read_text(encoding="utf-8"))
    assert annotation_payload["color"][0]["bboxes"][0]["label"] == "Animal (12)"
    summary_payload = json.loads(summary.read_text(encoding="utf-8"))
    assert summary_payload["total_hotspots"] == 1
    assert filtered.read_text(encoding="utf-8").count("\n") == 2


def test_config_file_supplies_margin_and_filters(tmp_path: Path, capsys) -> None:
    csv_path = _write_csv(
        tmp_path,
        ROW.format(hotspot_id="a", color=COLOR, hotspot_type="Animal"),
        ROW.format(hotspot_id="b", color=COLOR, hotspot_type="Anomaly"),
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "survey:\n  thermal_margin: 3\n  filters: hotspot_type=Anomaly\n",
        encoding="utf-8",
    )
    annotations = tmp_path / "annotations.json"

    exit_code = cli.main(
        [str(csv_path), "--config", str(config_path), "--annotations", str(annotations)]
    )

    assert exit_code == cli.EXIT_OK
    assert "  Anomaly: 1" in capsys.readouterr().out
    box = json.loads(annotations.read_text(encoding="utf-8"))["thermal16"][0]["bboxes"][0]
    assert (box["left"], box["right"]) == (97, 103)


def test_broken_filename_aborts_run(tmp_path: Path, capsys) -> None:
    csv_path = _write_csv(
        tmp_path,
        ROW.format(hotspot_id="a", color="broken.jpg", hotspot_type="Animal"),
    )

    assert cli.main([str(csv_path)]) == cli.EXIT_DECODE_ERROR
    assert "Total hotspots" not in capsys.readouterr().out


def test_bad_filter_spec_aborts_run(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path)
    assert cli.main([str(csv_path), "--filter", "hotspot_type"]) == cli.EXIT_DECODE_ERROR


def test_missing_input_file(tmp_path: Path) -> None:
    assert cli.main([str(tmp_path / "missing.csv")]) == cli.EXIT_IO_ERROR


def test_non_utf8_input_is_a_decode_error(tmp_path: Path, capsys) -> None:
    csv_path = tmp_path / "hotspots.csv"
    csv_path.write_bytes(HEADER.encode("utf-8") + b"a,\xff\xfe\n")

    assert cli.main([str(csv_path)]) == cli.EXIT_DECODE_ERROR
    assert "Total hotspots" not in capsys.readouterr().out


def test_unencodable_row_leaves_no_output_file(tmp_path: Path, capsys) -> None:
    bad_row = (
        "b,bad,CHESS_FL1_C_160407_235833.627_THERM-16BIT.PNG,"
        "CHESS_FL1_C_160407_235833.627_THERM-8.PNG,"
        f"{COLOR},,,,,,,Animal,12\n"
    )
    csv_path = _write_csv(
        tmp_path,
        ROW.format(hotspot_id="a", color=COLOR, hotspot_type="Animal"),
        bad_row,
    )
    output = tmp_path / "filtered.csv"

    exit_code = cli.main([str(csv_path), "--output", str(output)])

    assert exit_code == cli.EXIT_DECODE_ERROR
    assert "Errors: 1" in capsys.readouterr().out
    assert not output.exists()
    assert not (tmp_path / "filtered.csv.partial").exists()


def test_empty_margin_in_config_uses_default(tmp_path: Path) -> None:
    csv_path = _write_csv(tmp_path, ROW.format(hotspot_id="a", color=COLOR, hotspot_type="Animal"))
    config_path = tmp_path / "config.yaml"
    config_path.write_text("survey:\n  thermal_margin:\n", encoding="utf-8")
    annotations = tmp_path / "annotations.json"

    exit_code = cli.main(
        [str(csv_path), "--config", str(config_path), "--annotations", str(annotations)]
    )

    assert exit_code == cli.EXIT_OK
    box = json.loads(annotations.read_text(encoding="utf-8"))["thermal16"][0]["bboxes"][0]
    assert (box["left"], box["right"]) == (90, 110)


def test_setup_debug_logging_adds_single_handler(tmp_path: Path) -> None:
    logger = setup_debug_logging(tmp_path)
    try:
        setup_debug_logging(tmp_path)
        assert len(logger.handlers) == 1
        assert logger.propagate is False

        logging.getLogger("hotspots.debug.examiner").debug(
            "examiner.record_rejected",
            extra={"hotspot_id": "hs-1", "reason": "record_timestamp"},
        )
        logger.handlers[0].flush()
        line = (tmp_path / "logs" / "debug.log").read_text(encoding="utf-8").strip()
        assert "| hotspots.debug.examiner | examiner.record_rejected |" in line
        assert line.endswith("hotspot_id=hs-1 reason=record_timestamp")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
