"""Shared test fixtures — sample diffs and file maps."""

from __future__ import annotations

import textwrap
from typing import Dict

import pytest


@pytest.fixture
def files_a() -> Dict[str, str]:
    """Current content for a.ts."""
    return {"a.ts": "line1\nline2\nline3\n"}


@pytest.fixture
def diff_modify() -> str:
    """Change line2 to line2x with one line of context on each side."""
    return textwrap.dedent("""\
        diff --git a/a.ts b/a.ts
        index 1234567..89abcde 100644
        --- a/a.ts
        +++ b/a.ts
        @@ -1,3 +1,3 @@
         line1
        -line2
        +line2x
         line3
    """)


@pytest.fixture
def diff_create() -> str:
    """Create b.ts from scratch."""
    return textwrap.dedent("""\
        diff --git a/b.ts b/b.ts
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/b.ts
        @@ -0,0 +1,3 @@
        +export function greet(name: string) {
        +  return `Hello, ${name}!`;
        +}
    """)


@pytest.fixture
def diff_delete() -> str:
    """Delete a.ts entirely."""
    return textwrap.dedent("""\
        diff --git a/a.ts b/a.ts
        deleted file mode 100644
        index 1234567..0000000
        --- a/a.ts
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -line1
        -line2
        -line3
    """)


@pytest.fixture
def diff_rename() -> str:
    """Rename a.ts to c.ts while editing one line."""
    return textwrap.dedent("""\
        diff --git a/a.ts b/c.ts
        similarity index 80%
        rename from a.ts
        rename to c.ts
        index 1234567..89abcde 100644
        --- a/a.ts
        +++ b/c.ts
        @@ -1,3 +1,3 @@
         line1
        -line2
        +renamed
         line3
    """)


@pytest.fixture
def long_file() -> Dict[str, str]:
    """Twenty numbered lines in src/app.py."""
    return {"src/app.py": "".join(f"row {n}\n" for n in range(1, 21))}


@pytest.fixture
def diff_two_hunks() -> str:
    """Two hunks in one file, line numbers consistent with long_file."""
    return textwrap.dedent("""\
        diff --git a/src/app.py b/src/app.py
        --- a/src/app.py
        +++ b/src/app.py
        @@ -2,3 +2,4 @@ def header():
         row 2
        +inserted after 2
         row 3
         row 4
        @@ -15,3 +16,2 @@
         row 15
        -row 16
         row 17
    """)


@pytest.fixture
def diff_two_hunks_bad_counts() -> str:
    """Two hunks whose declared counts disagree with their bodies."""
    return textwrap.dedent("""\
        diff --git a/src/app.py b/src/app.py
        --- a/src/app.py
        +++ b/src/app.py
        @@ -2,3 +2,5 @@
         row 2
        +inserted after 2
         row 3
         row 4
        @@ -15,4 +16,2 @@
         row 15
        -row 16
         row 17
    """)


@pytest.fixture
def diff_multi_file() -> str:
    """Modify a.ts and create b.ts in one diff."""
    return textwrap.dedent("""\
        diff --git a/a.ts b/a.ts
        --- a/a.ts
        +++ b/a.ts
        @@ -1,3 +1,4 @@
         line1
         line2
        +line2.5
         line3
        diff --git a/b.ts b/b.ts
        new file mode 100644
        --- /dev/null
        +++ b/b.ts
        @@ -0,0 +1,1 @@
        +export const b = 1;
    """)
