"""Tests for allowlist enforcement."""

from patchgate.diff.parser import parse
from patchgate.engine.allowlist import enforce
from patchgate.engine.outcome import Stage


class TestEnforce:
    def test_allowed(self, diff_modify):
        assert enforce(parse(diff_modify), {"a.ts"}) is None

    def test_empty_allowlist(self, diff_modify):
        outcome = enforce(parse(diff_modify), set())
        assert outcome is not None
        assert outcome.stage is Stage.ALLOWLIST
        assert outcome.message == "Unauthorized file modification"
        assert outcome.detail == "a.ts"

    def test_first_offending_file_reported(self, diff_multi_file):
        outcome = enforce(parse(diff_multi_file), {"a.ts"})
        assert outcome.detail == "b.ts"

    def test_rename_needs_both_paths(self, diff_rename):
        assert enforce(parse(diff_rename), {"a.ts"}).detail == "c.ts"
        assert enforce(parse(diff_rename), {"c.ts"}).detail == "a.ts"
        assert enforce(parse(diff_rename), {"a.ts", "c.ts"}) is None

    def test_delete_checks_old_path(self, diff_delete):
        assert enforce(parse(diff_delete), set()).detail == "a.ts"

    def test_prefix_is_not_a_grant(self):
        diff = "--- a/src/app.py\n+++ b/src/app.py\n@@ -1 +1 @@\n-x\n+y\n"
        assert enforce(parse(diff), {"src", "app.py", "src/"}).detail == "src/app.py"
