"""Tests for the four detector families."""

from aicov_cli.detectors import DETECTORS, run_detectors
from aicov_cli.detectors.comment import _template_key, detect_comment_patterns
from aicov_cli.detectors.complexity import detect_complexity_patterns
from aicov_cli.detectors.naming import detect_naming_patterns
from aicov_cli.detectors.preprocess import preprocess
from aicov_cli.detectors.structural import detect_structure_patterns
from aicov_cli.detectors.tokens import naming_style, skeleton, split_words
from aicov_cli.models import PatternKind


def _lines(text, language="python"):
    return preprocess(text, language)


# ─── Registry ───────────────────────────────────────────────────────────────

def test_registry_covers_every_kind():
    assert set(DETECTORS) == set(PatternKind)


def test_run_detectors_on_empty_input(settings):
    assert run_detectors([], settings) == []


# ─── Tokens ─────────────────────────────────────────────────────────────────

def test_skeleton_abstracts_names_and_literals():
    assert skeleton('config.set_value("alpha", 1)') == ['I', '.', 'I', '(', 'S', ',', 'N', ')']
    assert skeleton("if a:") == ['if', 'I', ':']


def test_split_words_and_styles():
    assert split_words("fetchUserProfileData") == ["fetch", "user", "profile", "data"]
    assert split_words("user_name") == ["user", "name"]
    assert naming_style("user_name") == "snake_case"
    assert naming_style("userName") == "camelCase"
    assert naming_style("UserName") == "PascalCase"
    assert naming_style("MAX_SIZE") == "UPPER_CASE"
    assert naming_style("x") == "simple"


# ─── Comment style ──────────────────────────────────────────────────────────

def test_templated_comments(settings, generated_source):
    patterns = detect_comment_patterns(_lines(generated_source), settings)

    assert len(patterns) == 1
    p = patterns[0]
    assert p.kind is PatternKind.COMMENT
    assert p.line_numbers == (1, 2, 3, 4, 5, 6)
    assert p.confidence == 90


def test_restating_comment(settings):
    text = "# get user name\nuser_name = get_user_name()\n"
    patterns = detect_comment_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].line_numbers == (1, 2)
    assert "restate" in patterns[0].description


def test_section_marker_keys():
    assert _template_key("Args:", 3) == ("section", "args")
    assert _template_key("@param name the name", 3) == ("section", "param")
    assert _template_key("Get the user by id", 3) == ("sentence", "get", "5")
    assert _template_key("fix later", 3) is None


def test_no_comments_no_patterns(settings, human_source):
    assert detect_comment_patterns(_lines(human_source), settings) == []


# ─── Structure ──────────────────────────────────────────────────────────────

def test_repeated_line_shape(settings):
    text = "\n".join([
        "def setup():",
        '    config.set_value("alpha", 1)',
        '    config.set_value("beta", 2)',
        '    config.set_value("gamma", 3)',
        '    config.set_value("delta", 4)',
    ])
    patterns = detect_structure_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].kind is PatternKind.STRUCTURE
    assert patterns[0].line_numbers == (2, 3, 4, 5)
    assert patterns[0].confidence == 85


def test_repeated_block_shape(settings):
    text = "\n".join([
        "a = load(1)",
        "if a:",
        "    out.append(a)",
        "b = load(2)",
        "if b:",
        "    out.append(b)",
    ])
    patterns = detect_structure_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].line_numbers == (1, 2, 3, 4, 5, 6)
    assert "3-line block" in patterns[0].description
    assert patterns[0].confidence == 67


def test_varied_lines_have_no_structure(settings):
    text = 'x = compute(a)\nif x > 3:\n    return x\nprint("done")\n'
    assert detect_structure_patterns(_lines(text), settings) == []


def test_repeat_threshold_is_configurable(settings):
    text = "\n".join(f'config.set_value("k{i}", {i})' for i in range(3))
    assert detect_structure_patterns(_lines(text), settings)
    stricter = settings.model_copy(update={"structure_min_repeats": 4})
    assert detect_structure_patterns(_lines(text), stricter) == []


# ─── Naming ─────────────────────────────────────────────────────────────────

def test_placeholder_names(settings):
    text = "foo = 1\nbar = foo + 2\nbaz = bar * 3\n"
    patterns = detect_naming_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].kind is PatternKind.NAMING
    assert patterns[0].line_numbers == (1, 2, 3)
    assert patterns[0].signature == "bar, baz, foo"
    assert patterns[0].confidence == 90


def test_sequential_names(settings):
    text = "value1 = read()\nvalue2 = read()\ntotal = value1 + value2\n"
    patterns = detect_naming_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].line_numbers == (1, 2, 3)
    assert "value1" in patterns[0].signature


def test_boilerplate_verb_names(settings):
    text = "handleUserSubmit()\nfetchUserProfileData()\nx = 1\n"
    patterns = detect_naming_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert "Boilerplate" in patterns[0].description
    assert patterns[0].line_numbers == (1, 2)


def test_uniform_naming_islands(settings):
    names = ["alpha", "beta", "gamma", "delta", "omega", "north", "south", "east",
             "west", "red", "green", "blue", "cyan", "amber", "olive"]
    snake = [f"{n}_total = {n}_count" for n in names]
    camel = [f"{n}Total = {n}Count" for n in names]
    patterns = detect_naming_patterns(_lines("\n".join(snake + camel)), settings)

    assert [p.signature for p in patterns] == ["snake_case", "camelCase"]
    assert patterns[0].line_numbers == tuple(range(1, 16))
    assert patterns[1].line_numbers == tuple(range(16, 31))
    assert all(p.confidence == 85 for p in patterns)


def test_ordinary_names(settings):
    text = "total = compute_total(orders)\nreturn total\n"
    assert detect_naming_patterns(_lines(text), settings) == []


# ─── Complexity ─────────────────────────────────────────────────────────────

def test_uniform_block(settings):
    names = ["alpha", "bravo", "delta", "gamma", "kappa", "omega",
             "sigma", "theta", "tango", "hotel", "lima1", "oscar"]
    text = "\n".join(f"value_{n} = compute({n})" for n in names)
    patterns = detect_complexity_patterns(_lines(text), settings)

    assert len(patterns) == 1
    assert patterns[0].kind is PatternKind.COMPLEXITY
    assert patterns[0].line_numbers == tuple(range(1, 13))
    assert patterns[0].confidence == 70


def test_irregular_block(settings):
    short = "x=1"
    long = "some_really_long_variable_name = another_function_call(argument_one, argument_two)"
    text = "\n".join([short, long] * 6)
    assert detect_complexity_patterns(_lines(text), settings) == []


def test_small_file_has_no_blocks(settings, human_source):
    assert detect_complexity_patterns(_lines(human_source), settings) == []


def test_detectors_are_deterministic(settings, generated_source):
    lines = _lines(generated_source)
    assert run_detectors(lines, settings) == run_detectors(lines, settings)
