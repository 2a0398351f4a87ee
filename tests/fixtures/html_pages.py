"""
Sample HTML pages for extraction tests.
"""

ARTICLE_PAGE = """
<!DOCTYPE html>
<html>
<head>
    <title>Test Article</title>
    <style>body { color: red; }</style>
    <script>var tracking = "should not appear";</script>
</head>
<body>
    <header>
        <div class="logo">Site Name</div>
    </header>
    <nav>
        <ul><li>Home</li><li>About</li></ul>
    </nav>
    <div class="container">
        <h1>Test Article Title</h1>
        <p>This is the main content of the article. It contains important information.</p>
        <p>This is a second paragraph with additional details.</p>
    </div>
    <div class="sidebar">
        <p>Related links you might like</p>
    </div>
    <footer>Copyright 2023</footer>
</body>
</html>
"""

CHINESE_PAGE = """
<html>
<head><title>天气新闻</title></head>
<body>
    <div id="header"><p>网站导航</p></div>
    <p>今天天气很好。明天也很好。后天会下雨。</p>
    <p>天气很好的时候大家都出去玩。</p>
    <div class="advertisement"><p>购买我们的产品！</p></div>
    <div id="footer"><p>版权所有</p></div>
</body>
</html>
"""

# No article, main, paragraph or heading elements anywhere
NO_CONTENT_PAGE = """
<html>
<body>
    <div class="menu">Menu entry</div>
    <div>Plain text in a div.</div>
    <span>More plain text.</span>
    <script>alert("hidden");</script>
</body>
</html>
"""

# Every content element sits inside boilerplate
ONLY_BOILERPLATE_PAGE = """
<html>
<body>
    <nav><p>Navigation paragraph</p></nav>
    <footer><h2>Footer heading</h2></footer>
</body>
</html>
"""

MALFORMED_PAGE = "<html><body><div><p>Unclosed <b>bold text</div></span><p>Second & third</body"
