from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from typer.testing import CliRunner

from storefront.cli import app
from storefront.config.settings import RETAIN_ENV

FIXTURE = Path(__file__).parent / "fixtures" / "search_result.json"


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        # keep the user's saved settings out of the way
        self._settings = mock.patch(
            "storefront.config.settings.SETTINGS_PATH", Path(self._tmpdir.name) / "settings.json"
        )
        self._settings.start()
        env = {k: v for k, v in os.environ.items() if k != RETAIN_ENV}
        self._env = mock.patch.dict(os.environ, env, clear=True)
        self._env.start()
        self.runner = CliRunner()

    def tearDown(self) -> None:
        self._env.stop()
        self._settings.stop()
        self._tmpdir.cleanup()

    def test_filters_prints_view_model(self) -> None:
        result = self.runner.invoke(app, ["filters", str(FIXTURE), "--query", "fvid=r&fvid=gone"])
        self.assertEqual(result.exit_code, 0, result.output)
        out = json.loads(result.output)
        self.assertEqual([f["id"] for f in out["facets"]], ["color", "size", "brand"])
        self.assertEqual(out["facets"][0]["values"][0], {"id": "r", "name": "Red", "selected": True, "count": 5})
        self.assertEqual(out["hiddenSelectedIds"], ["gone"])

    def test_toggle_prints_next_query(self) -> None:
        result = self.runner.invoke(app, ["toggle", str(FIXTURE), "b", "--query", "q=tee&fvid=r"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "q=tee&fvid=r&fvid=b")

    def test_toggle_drop_hidden(self) -> None:
        args = ["toggle", str(FIXTURE), "s", "--query", "fvid=gone&fvid=r"]
        kept = self.runner.invoke(app, args)
        dropped = self.runner.invoke(app, args + ["--drop-hidden"])
        self.assertEqual(kept.output.strip(), "fvid=gone&fvid=r&fvid=s")
        self.assertEqual(dropped.output.strip(), "fvid=r&fvid=s")

    def test_missing_result_file(self) -> None:
        result = self.runner.invoke(app, ["filters", str(Path(self._tmpdir.name) / "nope.json")])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == "__main__":
    unittest.main()
