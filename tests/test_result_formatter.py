from conftest import info, recommended, required, warning

from src.themecheck.models import Severity
from src.themecheck.result_formatter import (
    ANSI,
    PLAIN,
    StyleRenderer,
    build_buckets,
    format_finding,
    parse_finding,
)


class TestParseFinding:
    def test_extracts_severity_and_removes_marker(self):
        finding = parse_finding("<span class=x>REQUIRED</span>: message")
        assert finding.level == "REQUIRED"
        assert finding.severity is Severity.REQUIRED
        assert finding.message == " message"

    def test_level_is_case_insensitive(self):
        finding = parse_finding('<span class="tc-lead tc-warning">Warning</span> : check this')
        assert finding.level == "WARNING"
        assert "span" not in finding.message

    def test_message_without_marker_has_unknown_level(self):
        finding = parse_finding("Just a message")
        assert finding.level == ""
        assert finding.severity is None
        assert finding.message == "Just a message"


class TestFormatFinding:
    def test_required_bullet(self):
        text = format_finding(" message", "REQUIRED", PLAIN)
        assert text == "× REQUIRED: message"

    def test_bullets_are_colored_per_severity(self):
        assert format_finding(" x", "REQUIRED", ANSI).startswith("\033[1;31m× REQUIRED:\033[0m")
        assert format_finding(" x", "WARNING", ANSI).startswith("\033[31m* WARNING:\033[0m")
        assert format_finding(" x", "RECOMMENDED", ANSI).startswith("\033[1;32m* RECOMMENDED:\033[0m")
        assert format_finding(" x", "INFO", ANSI).startswith("\033[1;36m* INFO:\033[0m")

    def test_unknown_levels(self):
        assert format_finding("plain message", "", ANSI) == "* plain message"
        assert format_finding(": odd", "NOTICE", PLAIN) == "* NOTICE: odd"

    def test_link_rendering(self):
        message = 'See <a href="http://example.com">Example</a> for details.'
        assert format_finding(message, "", ANSI) == "* See \033[1mExample\033[0m (http://example.com) for details."
        assert format_finding(message, "", PLAIN) == "* See Example (http://example.com) for details."

    def test_single_quoted_link(self):
        text = format_finding("<a href='https://developer.wordpress.org'>Handbook</a>", "", PLAIN)
        assert text == "* Handbook (https://developer.wordpress.org)"

    def test_line_breaks_become_indented_newlines(self):
        assert format_finding("a<br/>b<br>c<br />d", "", PLAIN) == "* a\n  b\n  c\n  d"

    def test_see_see_collapsed(self):
        assert format_finding("Bad call. See See: the docs", "", PLAIN) == "* Bad call. See: the docs"

    def test_emphasis_becomes_quotes(self):
        text = format_finding("Found <strong>eval</strong> in <em>functions.php</em>", "", PLAIN)
        assert text == '* Found "eval" in "functions.php"'

        colored = format_finding("<strong>eval</strong>", "", ANSI)
        assert colored == '* \033[1m"eval"\033[0m'

    def test_grep_spans_removed(self):
        text = format_finding("Line 3: <span class='tc-grep'>eval</span><span>(</span>", "", PLAIN)
        assert text == "* Line 3: eval("

    def test_pre_blocks(self):
        text = format_finding("In file.php<pre class='tc-grep'>eval($x);</pre>", "", PLAIN)
        assert text == "* In file.php\n  eval($x);"

        colored = format_finding('x<pre class="tc-grep">code</pre>', "", ANSI)
        assert colored == "* x\n  \033[33mcode\033[0m"

    def test_entities_decoded(self):
        text = format_finding(" &lt;?php echo &quot;hi&quot; &amp;&amp; &#039;x&#039;", "INFO", PLAIN)
        assert text == "* INFO: <?php echo \"hi\" && 'x'"

    def test_custom_renderer(self):
        renderer = StyleRenderer({"required": "<R>", "reset": "</>", "bold": "<B>"})
        text = format_finding(" <strong>x</strong>", "REQUIRED", renderer)
        assert text == '<R>× REQUIRED:</> <B>"x"</>'


class TestBuildBuckets:
    def test_full_message(self):
        buckets = build_buckets([required("Could not find <strong>wp_footer</strong>. See See: <a href=\"https://codex\">Docs</a>")])
        [text] = buckets.get(Severity.REQUIRED)
        assert text == '× REQUIRED: Could not find "wp_footer". See: Docs (https://codex)'
        assert "<span" not in text

    def test_duplicates_kept_once(self):
        message = warning("Found <strong>query_posts</strong>")
        buckets = build_buckets([message, message])
        assert buckets.count(Severity.WARNING) == 1
        assert len(buckets) == 1

    def test_same_text_under_different_levels_kept(self):
        buckets = build_buckets([recommended("x"), info("x")])
        assert buckets.count(Severity.RECOMMENDED) == 1
        assert buckets.count(Severity.INFO) == 1

    def test_bucket_order_and_counts(self):
        buckets = build_buckets(
            [info("i"), "loose", required("a"), recommended("r"), warning("w"), required("b")]
        )
        levels = [level for level, _ in buckets.items()]
        assert levels == ["REQUIRED", "WARNING", "RECOMMENDED", "INFO", ""]
        assert buckets.get("REQUIRED") == ["× REQUIRED: a", "× REQUIRED: b"]
        assert buckets.total_errors == 3

    def test_empty_unknown_bucket_not_listed(self):
        levels = [level for level, _ in build_buckets([info("i")]).items()]
        assert levels == ["REQUIRED", "WARNING", "RECOMMENDED", "INFO"]
