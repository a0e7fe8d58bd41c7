"""Tree-walking evaluation of Monkey ASTs.

evaluate(node, env) returns a runtime value for any node. Language-level failures are not raised: they come back as
object.Error values. Every step checks its sub-results for signals first (an Error, or a ReturnValue on its way to
the enclosing function call), so the first failure short-circuits all the way up. The only mutable state is the
Environment passed in.

Recursion depth follows AST nesting and Monkey call depth; a runaway recursive Monkey function ends in Python's
RecursionError, which the error handler reports.
"""

from monkey.runtime.environment import Environment
from monkey.runtime.object import (FALSE, NULL, TRUE, Error, Function, Integer, ObjectType, ReturnValue, is_error,
                                   native_bool)
from monkey.syntax import ast


def evaluate(node, env):
    """Evaluates node in env. Raises TypeError if node is not a Monkey AST node."""
    if isinstance(node, ast.Program):
        return eval_program(node, env)

    # statements
    elif isinstance(node, ast.ExpressionStatement):
        return evaluate(node.expression, env)

    elif isinstance(node, ast.LetStatement):
        value = evaluate(node.value, env)
        if is_signal(value):
            return value
        env.set(node.name.value, value)
        return NULL

    elif isinstance(node, ast.ReturnStatement):
        value = evaluate(node.return_value, env)
        if is_signal(value):
            return value
        return ReturnValue(value)

    elif isinstance(node, ast.BlockStatement):
        return eval_block_statement(node, env.enclosed())

    # expressions
    elif isinstance(node, ast.IntegerLiteral):
        return Integer(node.value)

    elif isinstance(node, ast.Boolean):
        return native_bool(node.value)

    elif isinstance(node, ast.Identifier):
        return eval_identifier(node, env)

    elif isinstance(node, ast.PrefixExpression):
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return eval_prefix_expression(node.operator, right)

    elif isinstance(node, ast.InfixExpression):
        left = evaluate(node.left, env)
        if is_signal(left):
            return left
        right = evaluate(node.right, env)
        if is_signal(right):
            return right
        return eval_infix_expression(node.operator, left, right)

    elif isinstance(node, ast.IfExpression):
        return eval_if_expression(node, env)

    elif isinstance(node, ast.FunctionLiteral):
        return Function(node.parameters, node.body, env)

    elif isinstance(node, ast.CallExpression):
        function = evaluate(node.function, env)
        if is_signal(function):
            return function
        args = eval_expressions(node.arguments, env)
        if len(args) == 1 and is_signal(args[0]):
            return args[0]
        return apply_function(function, args)

    raise TypeError(f"cannot evaluate {type(node).__name__}")


def eval_program(program, env):
    """Runs top-level statements in order. A return at top level ends the program with its unwrapped value."""
    result = NULL
    for stmt in program.statements:
        result = evaluate(stmt, env)

        if result.type == ObjectType.RETURN_VALUE:
            return result.value
        elif result.type == ObjectType.ERROR:
            return result
    return result


def eval_block_statement(block, env):
    """Like eval_program, but a ReturnValue is passed up still wrapped so that enclosing blocks stop too."""
    result = NULL
    for stmt in block.statements:
        result = evaluate(stmt, env)

        if result.type in (ObjectType.RETURN_VALUE, ObjectType.ERROR):
            return result
    return result


def eval_identifier(node, env):
    value = env.get(node.value)
    if value is None:
        return Error(f"identifier not found: {node.value}")
    return value


def eval_prefix_expression(operator, right):
    if operator == "!":
        return eval_bang_operator_expression(right)
    elif operator == "-":
        return eval_minus_operator_expression(right)
    return Error(f"unknown operator: {operator}{right.type}")


def eval_bang_operator_expression(right):
    if right is TRUE:
        return FALSE
    elif right is FALSE or right is NULL:
        return TRUE
    return FALSE


def eval_minus_operator_expression(right):
    if right.type != ObjectType.INTEGER:
        return Error(f"unknown operator: -{right.type}")
    return Integer(-right.value)


def eval_infix_expression(operator, left, right):
    if left.type == ObjectType.INTEGER and right.type == ObjectType.INTEGER:
        return eval_integer_infix_expression(operator, left, right)
    elif left.type != right.type:
        return Error(f"type mismatch: {left.type} {operator} {right.type}")
    elif operator == "==":
        return native_bool(left is right)
    elif operator == "!=":
        return native_bool(left is not right)
    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def eval_integer_infix_expression(operator, left, right):
    left_val, right_val = left.value, right.value

    if operator == "+":
        return Integer(left_val + right_val)
    elif operator == "-":
        return Integer(left_val - right_val)
    elif operator == "*":
        return Integer(left_val * right_val)
    elif operator == "/":
        if right_val == 0:
            return Error("division by zero")
        return Integer(truncating_div(left_val, right_val))
    elif operator == "<":
        return native_bool(left_val < right_val)
    elif operator == ">":
        return native_bool(left_val > right_val)
    elif operator == "==":
        return native_bool(left_val == right_val)
    elif operator == "!=":
        return native_bool(left_val != right_val)
    return Error(f"unknown operator: {left.type} {operator} {right.type}")


def truncating_div(dividend, divisor):
    """Integer division rounding toward zero (Python's // rounds toward negative infinity)."""
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend < 0) == (divisor < 0) else -quotient


def eval_if_expression(node, env):
    condition = evaluate(node.condition, env)
    if is_signal(condition):
        return condition

    if is_truthy(condition):
        return evaluate(node.consequence, env)
    elif node.alternative is not None:
        return evaluate(node.alternative, env)
    return NULL


def is_signal(obj):
    """Whether obj is an Error or a ReturnValue: either one stops evaluation of whatever contains it."""
    return is_error(obj) or obj.type == ObjectType.RETURN_VALUE


def is_truthy(obj):
    """Only false and null are falsy. 0 is truthy."""
    return obj is not FALSE and obj is not NULL


def eval_expressions(exprs, env):
    """Evaluates exprs left to right. If one fails (or returns), returns a list holding only that signal."""
    results = []
    for expr in exprs:
        evaluated = evaluate(expr, env)
        if is_signal(evaluated):
            return [evaluated]
        results.append(evaluated)
    return results


def apply_function(function, args):
    if not isinstance(function, Function):
        return Error(f"not a function: {function.type}")

    if len(args) != len(function.parameters):
        return Error(f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}")

    call_env = Environment(function.env)
    for param, arg in zip(function.parameters, args):
        call_env.set(param.value, arg)

    result = eval_block_statement(function.body, call_env)
    if result.type == ObjectType.RETURN_VALUE:
        return result.value
    return result
