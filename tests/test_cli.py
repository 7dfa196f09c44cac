import json
import re

import pytest

from cpansa_db.cli import main


def test_cli_writes_json_database(tmp_path, write_advisories, write_package_index):
    source = write_advisories("CPANSA-Foo-Bar.yml", {
        "distribution": "Foo-Bar",
        "advisories": [{"id": "CPANSA-Foo-Bar-2020-01"}],
    })
    index = write_package_index("Foo::Bar  1.0  A/AU/AUTHOR/Foo-Bar-1.0.tar.gz\n")
    output = tmp_path / "db.json"

    main([
        str(source),
        "--package-index", str(index),
        "--skip-releases",
        "--format", "json",
        "--output", str(output),
        "--summary-csv", str(tmp_path / "summary.csv"),
        "--quiet",
    ])

    data = json.loads(output.read_text(encoding="utf-8"))
    assert re.fullmatch(r"\d{8}\.001", data["version"])
    assert data["module2dist"] == {"Foo::Bar": "Foo-Bar"}
    assert data["dists"]["Foo-Bar"]["advisories"][0]["distribution"] == "Foo-Bar"
    assert (tmp_path / "summary.csv").exists()


def test_cli_no_output(tmp_path, write_advisories, write_package_index, capsys):
    source = write_advisories("CPANSA-Foo.yml", {"distribution": "Foo", "advisories": []})
    index = write_package_index("")

    main([str(source), "--package-index", str(index), "--skip-releases", "--no-output", "--quiet"])

    assert capsys.readouterr().out == ""


def test_cli_exits_nonzero_without_sources(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--source-root", str(tmp_path), "--skip-releases", "--quiet"])

    assert excinfo.value.code == 1
