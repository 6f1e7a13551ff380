"""
Tests for the command-line entry point.

Run: python -m pytest tests/test_cli.py -v
"""

import json
import os
import tempfile
import shutil


class TestCli:

    def setup_method(self):
        self.tmpdir = tempfile.mkdtemp()
        self.root = os.path.join(self.tmpdir, "memories")

    def teardown_method(self):
        shutil.rmtree(self.tmpdir)

    def run(self, command: dict, capsys):
        from clawmemory.__main__ import main
        code = main([json.dumps(command), "--root", self.root])
        return code, capsys.readouterr()

    def test_create_and_view(self, capsys):
        code, out = self.run({"command": "create", "path": "/memories/notes.txt", "file_text": "hello"}, capsys)
        assert code == 0
        assert out.out.strip() == "File created: /memories/notes.txt"

        code, out = self.run({"command": "view", "path": "/memories/notes.txt"}, capsys)
        assert code == 0
        assert out.out.strip() == "1→hello"

    def test_failure_goes_to_stderr(self, capsys):
        code, out = self.run({"command": "view", "path": "/memories/missing"}, capsys)
        assert code == 1
        assert out.out == ""
        assert "Memory operation failed: Path not found: /memories/missing" in out.err

    def test_invalid_json(self, capsys):
        from clawmemory.__main__ import main
        code = main(["{oops", "--root", self.root])
        assert code == 2
        assert "Invalid command JSON" in capsys.readouterr().err

    def test_custom_mount(self, capsys):
        from clawmemory.__main__ import main
        code = main([json.dumps({"command": "create", "path": "/vault/a.txt", "file_text": "x"}),
                     "--root", self.root, "--mount", "/vault"])
        assert code == 0
        assert os.path.exists(os.path.join(self.root, "a.txt"))
