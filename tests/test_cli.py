import json

import pytest

from substrate_rack_cad.__main__ import build_arg_parser, main


def test_cli_exports_selected_parts(tmp_path):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"rack.slot_count": 2}))
    dumped = tmp_path / "resolved.json"

    exit_code = main(
        [
            "--params",
            str(params),
            "--out",
            str(tmp_path / "build"),
            "--part",
            "mock_slide",
            "--part",
            "rack",
            "--dump-params",
            str(dumped),
        ],
    )

    assert exit_code == 0
    for name in ("mock_slide", "rack"):
        assert (tmp_path / "build" / f"{name}.stl").stat().st_size > 0
        assert (tmp_path / "build" / f"{name}.step").stat().st_size > 0
    assert not (tmp_path / "build" / "holder.stl").exists()

    resolved = json.loads(dumped.read_text())
    assert resolved["rack.slot_count"] == 2
    assert resolved["substrate.size_x"] == pytest.approx(25.4)


def test_cli_rejects_unknown_part():
    with pytest.raises(SystemExit):
        build_arg_parser().parse_args(["--part", "spaceship"])


def test_cli_rejects_bad_params(tmp_path):
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"rack.slot_count": 0}))

    with pytest.raises(ValueError):
        main(["--params", str(params), "--out", str(tmp_path)])
