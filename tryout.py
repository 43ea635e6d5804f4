from stackcalc.grouper import format_tree, group
from stackcalc.linearizer import linearize
from stackcalc.parser import build_tree
from stackcalc.runtime import VariableStore, run_line
from stackcalc.tokenizer import tokenize
from stackcalc.utils import CalculatorError, format_values

for code in [
    "5",
    "1 + 1",
    "4 + 6 * 3",
    "(4 + 6)",
    "(4+6) * 3",
    "(((1 + 2))) * 3",
    "7/6/2000",
    "10 - 5 - 2",
    "1 / 0",
    "a = 1; b= 2; c = a + b",
    "var_1 = (1 + 14 * (54 * 2)); var_1",
    "a = b = 10",
    "(1 + 2",
    "1 + @",
    "x + 1",
]:
    print("=" * 10)
    print(f"code: {code!r}")
    variables: VariableStore = dict()
    try:
        tokens = tokenize(code)
        print(f"tokens: {' '.join(str(t) for t in tokens)}")
        tree = group(tokens)
        print(f"grouped: {format_tree(tree)}")
        expression = build_tree(tree)
        print(f"ast: {expression}")
        instructions = linearize(expression)
        instructions_str = "\n".join(f" {i + 1:> 2}: {instr}" for i, instr in enumerate(instructions))
        print(f"instructions:\n{instructions_str}")
        results = run_line(instructions, variables)
    except CalculatorError as e:
        print(e)
        continue
    finally:
        print(f"variables: {variables}")
    print(f"stack: {format_values(results)}")
