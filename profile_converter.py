#!/usr/bin/env python3
"""Profile flathtml to find performance bottlenecks."""

import cProfile
import io
import pstats

from flathtml import html_to_text

# Sample page
html = """
<!DOCTYPE html>
<html>
<head><title>Test</title><style>body { margin: 0 }</style></head>
<body>
    <div class="container">
        <h1>Heading &mdash; with entities &amp; more</h1>
        <p>Paragraph 1 &copy; 2024</p>
        <p>Paragraph 2 &#x2022; &#8230;</p>
        <script>var unused = "&lt;p&gt;";</script>
        <table>
            <tr><td>Cell 1</td><td>Cell 2</td></tr>
            <tr><td>Cell 3</td><td>Cell 4</td></tr>
        </table>
        <ul><li>one</li><li>two<br>three</li></ul>
    </div>
</body>
</html>
""" * 100  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for _ in range(10):
    result = html_to_text(html)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
