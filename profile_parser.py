#!/usr/bin/env python3
"""Profile the tagged-text parser to find performance bottlenecks."""

import cProfile
import io
import pstats

from ptml import parse

# Sample tagged text
text = """
<b>Score</b>: <color=#ffcc00><size=24>12345</size></color>
<i>Press <b>SPACE</b> to continue</i>, or <color=red>ESC</color> to quit.
Plain line without any tags at all, just to keep the plain-text path busy.
<ruby=kan><b><i><u>nested</u></i></b></ruby>
""" * 200  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    plain_text, decorations = parse(text, strict=True)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(30)  # Top 30 functions
print(s.getvalue())
