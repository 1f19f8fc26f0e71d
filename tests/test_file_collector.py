import os

import pytest

from src.themecheck import file_collector
from src.themecheck.file_collector import collect_theme_files, file_extension, strip_php_comments


def _relative(files, root):
    base = os.path.realpath(root)
    return {os.path.relpath(path, base) for path in files}


def test_every_entry_lands_in_exactly_one_group(theme_dir):
    files = collect_theme_files(theme_dir)

    php, css, other = set(files.php), set(files.css), set(files.other)
    assert not php & css
    assert not php & other
    assert not css & other
    assert len(files) == len(php | css | other)


def test_groups_by_extension(theme_dir):
    files = collect_theme_files(theme_dir)

    assert _relative(files.php, theme_dir) == {
        "index.php",
        "functions.php",
        os.path.join("inc", "template-tags.php"),
    }
    assert _relative(files.css, theme_dir) == {"style.css"}
    assert {"readme.txt", os.path.join("js", "app.js"), "images", "inc", "js"} <= _relative(files.other, theme_dir)


def test_excluded_directories_never_collected(theme_dir):
    files = collect_theme_files(theme_dir)

    for path in files.paths():
        parts = os.path.relpath(path, os.path.realpath(theme_dir)).split(os.sep)
        assert "node_modules" not in parts
        assert "tests" not in parts


def test_dot_files_and_vcs_metadata_included(theme_dir):
    files = collect_theme_files(theme_dir)
    other = _relative(files.other, theme_dir)

    assert ".gitignore" in other
    assert ".git" in other
    assert os.path.join(".git", "HEAD") in other


def test_paths_are_absolute_and_directories_empty(theme_dir):
    files = collect_theme_files(theme_dir)

    assert all(os.path.isabs(path) for path in files.paths())
    assert files.other[os.path.realpath(theme_dir / "images")] == ""
    assert files.other[os.path.realpath(theme_dir / "readme.txt")] == "=== Sample ===\n"


def test_php_comments_stripped_css_raw(theme_dir):
    files = collect_theme_files(theme_dir)

    index = files.php[os.path.realpath(theme_dir / "index.php")]
    assert "main template" not in index
    assert "/* header */" not in index
    assert "'http://example.com'" in index
    assert index.count("\n") == 4

    style = files.css[os.path.realpath(theme_dir / "style.css")]
    assert "/* css comments stay */" in style


def test_unreadable_file_is_skipped_with_empty_content(theme_dir, monkeypatch, caplog):
    broken = os.path.realpath(theme_dir / "functions.php")
    real_read = file_collector._read_text

    def fake_read(path):
        if path == broken:
            raise PermissionError("denied")
        return real_read(path)

    monkeypatch.setattr(file_collector, "_read_text", fake_read)

    with caplog.at_level("WARNING"):
        files = collect_theme_files(theme_dir)

    assert files.php[broken] == ""
    assert files.unreadable == [broken]
    assert "Could not read" in caplog.text


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes need POSIX")
def test_named_pipe_is_skipped(theme_dir, caplog):
    fifo = theme_dir / "inc" / "pipe.php"
    os.mkfifo(fifo)

    with caplog.at_level("WARNING"):
        files = collect_theme_files(theme_dir)

    assert os.path.realpath(fifo) not in files.paths()
    assert files.unreadable == []
    assert "not a regular file" in caplog.text
    assert os.path.realpath(theme_dir / "functions.php") in files.php


def test_missing_root_raises(tmp_path):
    with pytest.raises(NotADirectoryError):
        collect_theme_files(tmp_path / "missing")


def test_file_extension():
    assert file_extension("index.php") == "php"
    assert file_extension("jquery.min.js") == "js"
    assert file_extension(".htaccess") == "htaccess"
    assert file_extension("README") == ""
    assert file_extension("LEGACY.PHP") == "PHP"


class TestStripPhpComments:
    def test_removes_all_comment_styles(self):
        code = "<?php\n// comment\n$a = 1; # hash\n/* block\n two */ $b = 2;\n"
        assert strip_php_comments(code) == "<?php\n\n$a = 1; \n\n $b = 2;\n"

    def test_doc_comments_removed(self):
        code = "<?php\n/**\n * Summary.\n */\nfunction f() {}\n"
        assert strip_php_comments(code) == "<?php\n\n\n\nfunction f() {}\n"

    def test_markers_inside_strings_preserved(self):
        code = (
            "<?php $u = \"http://example.com\"; $s = '/* not a comment */'; "
            "$h = \"#hash\"; $b = `ls // -la`; ?>"
        )
        assert strip_php_comments(code) == code

    def test_escaped_quotes(self):
        code = "<?php $s = 'it\\'s // fine'; // gone\n$t = \"say \\\"# hi\\\"\";\n"
        expected = "<?php $s = 'it\\'s // fine'; \n$t = \"say \\\"# hi\\\"\";\n"
        assert strip_php_comments(code) == expected

    def test_inline_html_untouched(self):
        code = "<p>// not php</p><?php /* x */ ?><p># html /* still html */</p>"
        assert strip_php_comments(code) == "<p>// not php</p><?php  ?><p># html /* still html */</p>"

    def test_line_comment_ends_at_close_tag(self):
        assert strip_php_comments("<?php // c ?>after // text") == "<?php ?>after // text"

    def test_heredoc_and_nowdoc_bodies_kept(self):
        code = (
            "<?php\n$t = <<<EOT\n// keep\n# keep\nEOT;\n"
            "$n = <<<'TXT'\n/* keep */\nTXT;\n// drop\n"
        )
        expected = (
            "<?php\n$t = <<<EOT\n// keep\n# keep\nEOT;\n"
            "$n = <<<'TXT'\n/* keep */\nTXT;\n\n"
        )
        assert strip_php_comments(code) == expected

    def test_attributes_are_not_comments(self):
        code = "<?php\n#[Attribute]\nclass A {}\n"
        assert strip_php_comments(code) == code

    def test_short_echo_tag(self):
        assert strip_php_comments("<?= $x /* y */ ?>") == "<?= $x  ?>"

    def test_unterminated_block_comment(self):
        assert strip_php_comments("<?php $a = 1; /* open\nstill") == "<?php $a = 1; \n"

    def test_line_count_preserved(self):
        code = "<?php\n/*\n\n*/\n// x\r\n$a = '\n';\n"
        assert strip_php_comments(code).count("\n") == code.count("\n")
