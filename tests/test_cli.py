"""CLI behaviour tests."""

from __future__ import annotations

import json

import pytest

from pkgcatalog.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "scan"])
    assert args.verbose is True
    assert args.command == "scan"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["scan", "--verbose"])
    assert args.verbose is True
    assert args.command == "scan"


def test_cli_collects_repeated_cataloger_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["scan", "some/dir", "--cataloger", "a", "--cataloger", "b", "--workers", "2", "-o", "json"]
    )
    assert args.path == "some/dir"
    assert args.catalogers == ["a", "b"]
    assert args.workers == 2
    assert args.output == "json"


def test_scan_prints_json_catalog(tree_builder, capsys) -> None:
    tree_builder.write(
        {
            "site-packages/six-1.15.0.dist-info/METADATA": "Name: six\nVersion: 1.15.0\nLicense: MIT\n",
            "requirements.txt": "click==7.1.2\n",
        }
    )

    main(["scan", str(tree_builder.path()), "--output", "json"])

    payload = json.loads(capsys.readouterr().out)
    assert [(package["name"], package["found_by"]) for package in payload["packages"]] == [
        ("six", "python-package-cataloger"),
        ("click", "python-index-cataloger"),
    ]
    assert payload["packages"][0]["metadata"]["site_packages_root_path"] == "site-packages"


def test_scan_honours_config_file(tree_builder, capsys) -> None:
    tree_builder.write(
        {
            ".pkgcatalog.yml": """
                catalogers:
                  enabled: [python-index-cataloger]
                exclude_paths: ["vendor/"]
            """,
            "requirements.txt": "click==7.1.2\n",
            "vendor/requirements.txt": "hidden==1.0\n",
            "site-packages/six-1.15.0.dist-info/METADATA": "Name: six\nVersion: 1.15.0\n",
        }
    )

    main(["scan", str(tree_builder.path())])

    out = capsys.readouterr().out
    assert "click" in out
    assert "hidden" not in out
    assert "six" not in out


def test_scan_writes_log_file(tree_builder, tmp_path, capsys) -> None:
    log_file = tmp_path / "scan.log"

    main(["scan", str(tree_builder.path()), "--log-file", str(log_file), "-v"])

    assert "No packages discovered" in capsys.readouterr().out
    assert "Cataloging with 2 catalogers" in log_file.read_text(encoding="utf-8")


def test_scan_missing_path_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "pkgcatalog scan failed" in capsys.readouterr().err


def test_scan_unknown_cataloger_exits_with_error(tree_builder, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(tree_builder.path()), "--cataloger", "nope"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "No cataloger named nope" in err
    assert "python-package-cataloger" in err


def test_scan_invalid_config_exits_with_error(tree_builder, capsys) -> None:
    tree_builder.write({".pkgcatalog.yml": "- not\n- a mapping\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(tree_builder.path())])

    assert excinfo.value.code == 1
    assert "must contain a mapping" in capsys.readouterr().err


def test_catalogers_command_lists_names(capsys) -> None:
    main(["catalogers"])

    out = capsys.readouterr().out.splitlines()
    assert out[:2] == ["python-package-cataloger", "python-index-cataloger"]
