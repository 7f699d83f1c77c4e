"""
Tests for the formula evaluator.
"""

import threading

import pytest

from plural_formula import (
    MAX_INTEGER,
    MIN_INTEGER,
    ArithmeticOverflowError,
    DivisionByZeroError,
    EvaluationContext,
    Evaluator,
    ModuloByZeroError,
    evaluate,
    parse,
)

SLAVIC_FORMULA = (
    "n%10==1 && n%100!=11 ? 0 : "
    "n%10>=2 && n%10<=4 && (n%100<12 || n%100>14) ? 1 : 2"
)

ARABIC_FORMULA = (
    "n==0 ? 0 : n==1 ? 1 : n==2 ? 2 : "
    "n%100>=3 && n%100<=10 ? 3 : n%100>=11 ? 4 : 5"
)


def eval_expr(expression: str, n: int = 0) -> int:
    """Helper to evaluate a formula and return the value."""
    ast = parse(expression)
    result = evaluate(ast, EvaluationContext(n=n, source=expression))
    if not result.success:
        raise RuntimeError(result.error)
    return result.value


def eval_raising(expression: str, n: int = 0) -> int:
    """Helper that evaluates through the raising Evaluator API."""
    return Evaluator(EvaluationContext(n=n, source=expression)).evaluate(parse(expression))


class TestLiteralsAndVariable:
    """Tests for leaf evaluation."""

    def test_evaluates_number_literal(self):
        assert eval_expr("42") == 42

    @pytest.mark.parametrize("n", [-100, -1, 0, 1, 100, MAX_INTEGER, MIN_INTEGER])
    def test_evaluates_variable(self, n):
        assert eval_expr("n", n) == n

    def test_accepts_bare_quantity(self):
        assert evaluate(parse("n * 2"), 21).value == 42

    def test_rejects_non_integer_quantity(self):
        with pytest.raises(TypeError):
            EvaluationContext(n=1.5)

    def test_rejects_boolean_quantity(self):
        with pytest.raises(TypeError):
            EvaluationContext(n=True)

    def test_quantity_outside_64_bit_range_is_overflow(self):
        result = evaluate(parse("n"), MAX_INTEGER + 1)
        assert not result.success
        assert result.error_kind == "arithmetic-overflow"


class TestArithmetic:
    """Tests for arithmetic operators."""

    def test_addition(self):
        assert eval_expr("n + 10", 100) == 110

    def test_subtraction_may_go_negative(self):
        assert eval_expr("n - 10", 5) == -5

    def test_multiplication(self):
        assert eval_expr("n * 10", 5) == 50

    def test_division_truncates(self):
        assert eval_expr("n / 10", 35) == 3

    def test_modulo(self):
        assert eval_expr("n % 10", 23) == 3

    def test_negation(self):
        assert eval_expr("-n", 100) == -100

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("-7 / 2", -3),
            ("7 / -2", -3),
            ("-7 / -2", 3),
            ("-7 % 2", -1),
            ("7 % -2", 1),
            ("-7 % -2", -1),
        ],
    )
    def test_division_rounds_toward_zero(self, expression, expected):
        assert eval_expr(expression) == expected

    def test_negative_quantity_modulo(self):
        assert eval_expr("n % 10", -21) == -1


class TestComparisonAndLogic:
    """Tests for comparison and logical operators."""

    @pytest.mark.parametrize(
        "expression,n,expected",
        [
            ("n == 10", 10, 1),
            ("n == 10", 100, 0),
            ("n != 10", 2, 1),
            ("n != 10", 10, 0),
            ("n < 10", 2, 1),
            ("n < 10", 10, 0),
            ("n <= 10", 10, 1),
            ("n > 10", 100, 1),
            ("n > 10", 10, 0),
            ("n >= 10", 10, 1),
            ("n >= 10", 2, 0),
        ],
    )
    def test_comparisons_yield_zero_or_one(self, expression, n, expected):
        assert eval_expr(expression, n) == expected

    def test_not(self):
        assert eval_expr("!n", 0) == 1
        assert eval_expr("!n", 100) == 0
        assert eval_expr("!n", -3) == 0

    def test_and_yields_one_not_operand(self):
        assert eval_expr("n && 7", 5) == 1

    def test_or_yields_one_not_operand(self):
        assert eval_expr("n || 0", 5) == 1
        assert eval_expr("0 || n", 0) == 0

    def test_and_range(self):
        formula = "(5 < n) && n <= 25"
        assert [eval_expr(formula, n) for n in (0, 5, 10, 25, 100)] == [0, 0, 1, 1, 0]

    def test_or_range(self):
        formula = "(5 >= n) || n > 25"
        assert [eval_expr(formula, n) for n in (0, 5, 10, 25, 100)] == [1, 1, 0, 0, 1]


class TestPrecedenceSemantics:
    """Tests for the observable effect of operator precedence."""

    def test_addition_before_equality(self):
        assert eval_expr("n + 1 == 2", 1) == 1
        assert eval_expr("n + 1 == 2", 0) == 0
        assert eval_expr("n + 1 == 2", 5) == 0

    def test_not_applies_to_whole_sum(self):
        # !(0 + 1), not (!0) + 1
        assert eval_expr("!n + 1", 0) == 0

    def test_chained_comparison_compares_previous_result(self):
        # (5 < 3) < 2 is 0 < 2
        assert eval_expr("5 < n < 2", 3) == 1
        # (1 < 3) < 1 is 1 < 1
        assert eval_expr("1 < n < 1", 3) == 0


class TestShortCircuit:
    """Tests for short-circuit evaluation."""

    def test_or_skips_right_operand(self):
        assert eval_expr("1 || (1/0)") == 1

    def test_and_skips_right_operand(self):
        assert eval_expr("0 && (1/0)") == 0

    def test_or_evaluates_right_operand_when_needed(self):
        result = evaluate(parse("0 || (1/0)"), 0)
        assert result.error_kind == "division-by-zero"


class TestTernary:
    """Tests for ternary evaluation."""

    @pytest.mark.parametrize("n,expected", [(0, 0), (1, 1), (5, 2)])
    def test_nested_ternary(self, n, expected):
        assert eval_expr("n == 0 ? 0 : n == 1 ? 1 : 2", n) == expected

    def test_untaken_branch_is_not_evaluated(self):
        assert eval_expr("(n == 0) ? 1 : (1/n)", 0) == 1

    def test_untaken_overflow_is_not_evaluated(self):
        assert eval_expr("n > 0 ? n : n * n", MAX_INTEGER) == MAX_INTEGER

    @pytest.mark.parametrize(
        "n,expected",
        [
            (10, 0),
            (43, 10),
            (53, 10),
            (55, 20),
            (44, 20),
            (441, 1234),
            (404, 1234),
            (150, 850),
            (156, 844),
            (200, 800),
        ],
    )
    def test_big_nested_expression(self, n, expected):
        formula = (
            "n > 10 ? (n % 10) == 3 ? 10 : n < 100 ? 20 : "
            "(!(n > 200) ? -n + 1000 : 1234) : n - 10"
        )
        assert eval_expr(formula, n) == expected


class TestErrors:
    """Tests for evaluation errors."""

    def test_division_by_zero(self):
        result = evaluate(parse("1/n"), EvaluationContext(n=0, source="1/n"))
        assert not result.success
        assert result.value is None
        assert result.error_kind == "division-by-zero"
        assert "1 / n" in result.error

    def test_division_by_zero_raises_from_evaluator(self):
        with pytest.raises(DivisionByZeroError) as exc_info:
            eval_raising("n % 10 + 5 / (n - 3)", 3)
        error = exc_info.value
        assert error.operator == "/"
        assert error.subexpression == "5 / (n - 3)"
        assert error.position == 11

    def test_modulo_by_zero(self):
        with pytest.raises(ModuloByZeroError) as exc_info:
            eval_raising("10 % n", 0)
        assert exc_info.value.kind == "modulo-by-zero"
        assert exc_info.value.operator == "%"

    @pytest.mark.parametrize(
        "expression,n",
        [
            ("n + 1", MAX_INTEGER),
            ("n - 1", MIN_INTEGER),
            ("n * 2", MAX_INTEGER),
            ("-n", MIN_INTEGER),
            ("n / -1", MIN_INTEGER),
        ],
    )
    def test_overflow_is_an_error(self, expression, n):
        with pytest.raises(ArithmeticOverflowError):
            eval_raising(expression, n)

    def test_min_modulo_minus_one_does_not_overflow(self):
        assert eval_expr("n % -1", MIN_INTEGER) == 0

    def test_error_does_not_poison_the_tree(self):
        ast = parse("100 / n")
        assert not evaluate(ast, 0).success
        assert evaluate(ast, 4).value == 25
        assert not evaluate(ast, 0).success
        assert evaluate(ast, -3).value == -33


class TestScenarios:
    """End-to-end plural selection."""

    @pytest.mark.parametrize("n,expected", [(0, 1), (1, 0), (5, 1)])
    def test_english(self, n, expected):
        assert eval_expr("n != 1", n) == expected

    @pytest.mark.parametrize(
        "n,expected",
        [(1, 0), (2, 1), (5, 2), (21, 0), (11, 2), (12, 2), (14, 2), (22, 1), (111, 2), (102, 1)],
    )
    def test_slavic(self, n, expected):
        assert eval_expr(SLAVIC_FORMULA, n) == expected

    @pytest.mark.parametrize(
        "n,expected",
        [(0, 0), (1, 1), (2, 2), (3, 3), (10, 3), (11, 4), (99, 4), (100, 5), (102, 5), (103, 3)],
    )
    def test_arabic(self, n, expected):
        assert eval_expr(ARABIC_FORMULA, n) == expected

    def test_evaluation_is_deterministic(self):
        ast = parse(SLAVIC_FORMULA)
        assert [evaluate(ast, n).value for n in range(200)] == [
            evaluate(ast, n).value for n in range(200)
        ]

    def test_concurrent_evaluation_shares_tree(self):
        ast = parse(SLAVIC_FORMULA)
        expected = {n: evaluate(ast, n).value for n in range(1000)}
        mismatches = []

        def worker(offset: int) -> None:
            for n in range(offset, 1000, 4):
                if evaluate(ast, n).value != expected[n]:
                    mismatches.append(n)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert mismatches == []
