"""
Tests for the `audit` command.

Verifies:
1. Clean sources pass with exit code 0.
2. Leftover CommonJS usage is reported (table or JSON) with exit code 1.
3. Syntax errors are reported as failed files.
4. Nothing is written to disk.
"""

import json

from js_switcheroo.cli.__main__ import main


def write(path, text):
  path.parent.mkdir(parents=True, exist_ok=True)
  path.write_text(text, encoding="utf-8")
  return path


def test_clean_file_passes(tmp_path):
  src = write(tmp_path / "index.js", "var a = require('a');\nexports.b = a;\n")
  assert main(["audit", str(src)]) == 0
  assert src.read_text(encoding="utf-8") == "var a = require('a');\nexports.b = a;\n"


def test_findings_as_json(tmp_path, capsys):
  src = write(tmp_path / "index.js", "setup();\nvar a = require('a');\n")

  assert main(["audit", str(src), "--json"]) == 1
  findings = json.loads(capsys.readouterr().out)
  assert findings == [
    {
      "file": "index.js",
      "line": 2,
      "column": 9,
      "kind": "unsupported-import",
      "message": "Unsupported 'require' call cannot be transformed into an import",
    }
  ]


def test_safe_functions_option(tmp_path, capsys):
  src = write(tmp_path / "index.js", "setup();\nvar a = require('a');\n")
  assert main(["audit", str(src), "--json", "--safe-functions", "setup"]) == 0
  assert json.loads(capsys.readouterr().out) == []


def test_directory_table(tmp_path, recorded_console):
  write(tmp_path / "src" / "ok.js", "exports.a = 1;\n")
  write(tmp_path / "src" / "lib" / "nested.js", "if (x) { module.exports = 1; }\n")
  write(tmp_path / "src" / "broken.js", "var = ;\n")

  assert main(["audit", str(tmp_path / "src")]) == 1
  text = recorded_console.export_text()
  assert "CommonJS Audit" in text
  assert "unsupported-export" in text
  assert "broken.js" in text


def test_directory_json_includes_failures(tmp_path, capsys):
  write(tmp_path / "src" / "broken.js", "var = ;\n")

  assert main(["audit", str(tmp_path / "src"), "--json"]) == 1
  findings = json.loads(capsys.readouterr().out)
  assert findings[0]["file"] == "broken.js"
  assert findings[0]["error"].startswith("Parse Error")


def test_missing_path(tmp_path):
  assert main(["audit", str(tmp_path / "missing")]) == 1
