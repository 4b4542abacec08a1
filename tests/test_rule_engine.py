"""Unit tests for the rule engine."""

import pytest

from pr_labeler.exceptions import ConfigurationError
from pr_labeler.models import LabelerConfig, LabelMatcher, PullRequestAttributes
from pr_labeler.services.rule_engine import (
    BranchCondition,
    FilesCondition,
    MergeableCondition,
    SizeAboveCondition,
    SizeBelowCondition,
    TitleCondition,
    compile_matcher,
    evaluate,
)


def make_attributes(**overrides) -> PullRequestAttributes:
    values = {
        "owner": "srvaroa",
        "repo_name": "labeler",
        "number": 1,
        "title": "WIP: Add the labeler action",
        "branch_name": "srvaroa-patch-1",
        "mergeable": False,
        "diff_size": 9,
        "changed_files": frozenset({"pkg/labeler_test.go"}),
    }
    values.update(overrides)
    return PullRequestAttributes(**values)


def make_config(*matchers: LabelMatcher) -> LabelerConfig:
    return LabelerConfig(version=1, matchers=matchers)


class TestCompileMatcher:
    """Test conversion of matchers into conditions."""

    def test_vacuous_matcher_has_no_conditions(self) -> None:
        compiled = compile_matcher(LabelMatcher(label="WIP"))

        assert compiled.conditions == ()
        assert compiled.matches(make_attributes()) is False

    def test_empty_values_are_unspecified(self) -> None:
        compiled = compile_matcher(LabelMatcher(label="WIP", title="", branch="", files=[]))

        assert compiled.conditions == ()

    def test_every_condition_kind(self) -> None:
        matcher = LabelMatcher(
            label="All",
            title="^WIP",
            branch="^srvaroa",
            mergeable="False",
            size_below="10",
            size_above=1,
            files=["_test.go$"],
        )

        kinds = [type(condition) for condition in compile_matcher(matcher).conditions]

        assert kinds == [
            TitleCondition,
            BranchCondition,
            MergeableCondition,
            SizeBelowCondition,
            SizeAboveCondition,
            FilesCondition,
        ]

    def test_invalid_title_pattern(self) -> None:
        with pytest.raises(ConfigurationError, match="title"):
            compile_matcher(LabelMatcher(label="WIP", title="(unclosed"))

    def test_invalid_file_pattern(self) -> None:
        with pytest.raises(ConfigurationError, match="files"):
            compile_matcher(LabelMatcher(label="Files", files=["^pkg/", "[z-a]"]))

    def test_invalid_threshold(self) -> None:
        with pytest.raises(ConfigurationError, match="size-below"):
            compile_matcher(LabelMatcher(label="S", size_below="ten"))

    def test_invalid_mergeable_value(self) -> None:
        with pytest.raises(ConfigurationError, match="mergeable"):
            compile_matcher(LabelMatcher(label="M", mergeable="maybe"))


class TestEvaluate:
    """Test evaluation of a configuration against pull request attributes."""

    def test_no_matchers(self) -> None:
        assert evaluate(make_config(), make_attributes()) == frozenset()

    def test_only_vacuous_matchers(self) -> None:
        config = make_config(LabelMatcher(label="WIP"), LabelMatcher(label="Fix"))

        assert evaluate(config, make_attributes()) == frozenset()

    def test_unsupported_version(self) -> None:
        config = LabelerConfig(version=2, matchers=[LabelMatcher(label="WIP", title="^WIP")])

        with pytest.raises(ConfigurationError, match="version"):
            evaluate(config, make_attributes())

    def test_bad_matcher_fails_whole_config(self) -> None:
        config = make_config(
            LabelMatcher(label="WIP", title="^WIP"),
            LabelMatcher(label="Broken", branch="*oops"),
        )

        with pytest.raises(ConfigurationError):
            evaluate(config, make_attributes())

    def test_title_pattern_anchors_without_full_match(self) -> None:
        config = make_config(LabelMatcher(label="WIP", title="^WIP:"))

        assert evaluate(config, make_attributes()) == {"WIP"}
        assert evaluate(config, make_attributes(title="Not WIP: yet")) == frozenset()

    def test_unanchored_pattern_matches_anywhere(self) -> None:
        config = make_config(LabelMatcher(label="Fix", title="Fix: .*"))

        assert evaluate(config, make_attributes(title="Hotfix: Fix: typo")) == {"Fix"}

    def test_branch_rule(self) -> None:
        matching = make_config(LabelMatcher(label="Branch", branch="^srvaroa-patch.*"))
        not_matching = make_config(LabelMatcher(label="Branch", branch="^does/not-match/*"))

        assert evaluate(matching, make_attributes()) == {"Branch"}
        assert evaluate(not_matching, make_attributes()) == frozenset()

    @pytest.mark.parametrize(
        ("mergeable_state", "mergeable", "expected"),
        [
            ("True", True, {"M"}),
            ("True", False, set()),
            ("False", False, {"M"}),
            ("False", True, set()),
        ],
    )
    def test_mergeable_rule(self, mergeable_state, mergeable, expected) -> None:
        config = make_config(LabelMatcher(label="M", mergeable=mergeable_state))

        assert evaluate(config, make_attributes(mergeable=mergeable)) == expected

    def test_size_below_is_strict(self) -> None:
        assert evaluate(make_config(LabelMatcher(label="S", size_below=10)), make_attributes(diff_size=9)) == {"S"}
        assert evaluate(make_config(LabelMatcher(label="S", size_below=9)), make_attributes(diff_size=9)) == frozenset()

    def test_size_above_is_strict(self) -> None:
        config = make_config(LabelMatcher(label="L", size_above=9))

        assert evaluate(config, make_attributes(diff_size=9)) == frozenset()
        assert evaluate(config, make_attributes(diff_size=10)) == {"L"}

    def test_size_range(self) -> None:
        config = make_config(LabelMatcher(label="M", size_above="9", size_below="100"))

        assert evaluate(config, make_attributes(diff_size=50)) == {"M"}
        assert evaluate(config, make_attributes(diff_size=100)) == frozenset()
        assert evaluate(config, make_attributes(diff_size=5)) == frozenset()

    def test_files_rule(self) -> None:
        matching = make_config(LabelMatcher(label="Files", files=["^pkg/.*_test.go"]))
        unrelated = make_config(LabelMatcher(label="Files", files=["^docs/"]))

        assert evaluate(matching, make_attributes()) == {"Files"}
        assert evaluate(unrelated, make_attributes()) == frozenset()

    def test_files_rule_any_pattern_any_file(self) -> None:
        config = make_config(LabelMatcher(label="Docs", files=["^cmd/", "\\.md$"]))
        attributes = make_attributes(changed_files=frozenset({"pkg/labeler.go", "README.md"}))

        assert evaluate(config, attributes) == {"Docs"}

    def test_files_rule_without_changed_files(self) -> None:
        config = make_config(LabelMatcher(label="Files", files=[".*"]))

        assert evaluate(config, make_attributes(changed_files=frozenset())) == frozenset()

    def test_all_conditions_must_hold(self) -> None:
        config = make_config(LabelMatcher(label="WIP", title="^WIP:.*", mergeable="False"))

        assert evaluate(config, make_attributes()) == {"WIP"}
        assert evaluate(config, make_attributes(mergeable=True)) == frozenset()

    def test_later_true_condition_does_not_mask_earlier_false(self) -> None:
        config = make_config(LabelMatcher(label="WIP", title="^DOES NOT MATCH:.*", mergeable="False"))

        assert evaluate(config, make_attributes()) == frozenset()

    @pytest.mark.parametrize(
        "override",
        [
            {"title": "Ready for review"},
            {"branch_name": "main"},
            {"mergeable": True},
            {"diff_size": 500},
            {"diff_size": 0},
            {"changed_files": frozenset({"README.md"})},
        ],
    )
    def test_any_single_failing_condition_drops_label(self, override) -> None:
        config = make_config(
            LabelMatcher(
                label="All",
                title="^WIP",
                branch="^srvaroa",
                mergeable="False",
                size_below=100,
                size_above=1,
                files=["^pkg/"],
            ),
        )

        assert evaluate(config, make_attributes()) == {"All"}
        assert evaluate(config, make_attributes(**override)) == frozenset()

    def test_matchers_sharing_a_label_are_ored(self) -> None:
        config = make_config(
            LabelMatcher(label="Branch", branch="^srvaroa-patch.*"),
            LabelMatcher(label="Branch", branch="WONT MATCH"),
        )

        assert evaluate(config, make_attributes()) == {"Branch"}
        assert evaluate(config, make_attributes(branch_name="feature/x")) == frozenset()

    def test_independent_labels(self) -> None:
        config = make_config(
            LabelMatcher(label="WIP", title="^WIP:.*"),
            LabelMatcher(label="ShouldRemove", title="^MEH.*"),
            LabelMatcher(label="S", size_below=10),
        )

        assert evaluate(config, make_attributes()) == {"WIP", "S"}
