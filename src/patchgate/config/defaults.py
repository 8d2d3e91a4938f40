"""Starter .patchgate.toml template."""

DEFAULT_TOML = """\
# patchgate configuration
version = "1.0"

[engine]
window = 5                 # lines scanned forward for each context/deleted line
require_git_header = false # also demand a 'diff --git' line

[apply]
partial = false            # all-or-nothing unless true

[limits]
max_diff_kb = 256          # larger diffs are refused before validation
max_file_kb = 1024         # larger workspace files are refused

[output]
format = "terminal"        # terminal | json
show_summary = true

[allowlist]
# files = ["src/app.ts"]   # exact paths the patch may touch
# globs = ["src/**/*.ts"]  # expanded against the workspace
"""
