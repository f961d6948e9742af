from __future__ import annotations

from support import make_step

from useragent.core.score import calculate_intuitiveness_score, generate_summary


def test_empty_session_scores_neutral() -> None:
    assert calculate_intuitiveness_score([]) == 5.0


def test_all_met_is_perfect() -> None:
    steps = [make_step(n, "met") for n in range(1, 4)]

    assert calculate_intuitiveness_score(steps) == 10.0


def test_penalties_per_outcome() -> None:
    steps = [make_step(1, "met"), make_step(2, "partial"), make_step(3, "unmet"), make_step(4, "surprised")]

    assert calculate_intuitiveness_score(steps) == 5.5


def test_score_is_clamped_at_zero() -> None:
    steps = [make_step(n, "unmet") for n in range(1, 9)]

    assert calculate_intuitiveness_score(steps) == 0.0


def test_generate_summary_deduplicates_in_first_seen_order() -> None:
    steps = [
        make_step(1, suggestions=["Make the button bigger"], user_quote="Where am I?"),
        make_step(2, suggestions=["Add a label", "Make the button bigger"], user_quote="Where am I?"),
        make_step(3, user_quote="Nice."),
    ]

    summary = generate_summary(steps, ["Search is hidden", "Menu is confusing", "Search is hidden"])

    assert summary.total_steps == 3
    assert summary.issues_found == ("Search is hidden", "Menu is confusing")
    assert summary.improvements == ("Make the button bigger", "Add a label")
    assert summary.user_quotes == ("Where am I?", "Nice.")
    assert summary.intuitiveness_score == 10.0


def test_score_ignores_step_order() -> None:
    results = ["unmet", "met", "surprised", "partial", "met"]
    forward = [make_step(n, result) for n, result in enumerate(results, start=1)]
    backward = [make_step(n, result) for n, result in enumerate(reversed(results), start=1)]

    assert calculate_intuitiveness_score(forward) == calculate_intuitiveness_score(backward) == 5.5
