## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import ast
from functools import lru_cache

import lark
from .errors import EmberParseError, EmberIncompleteParse


GRAMMAR = r"""start: (_SEP | statement _SEP)* statement?

?statement: module_decl | doc_decl | def_decl | assign | expr_stmt
module_decl: "module" MODULE_NAME
doc_decl: "@doc" STRING
def_decl: "def" NAME "(" params? ")" "=" expr
assign: NAME "=" expr
expr_stmt: expr
params: NAME ("," NAME)*

?expr: comparison
?comparison: sum ((EQ | NE | LE | GE | LT | GT) sum)?
?sum: product ((CONCAT | PLUS | MINUS) product)*
?product: unary ((STAR | SLASH) unary)*
?unary: MINUS unary -> neg
      | primary
?primary: (NAME | QUALIFIED) "(" args? ")" -> call
        | "fn" "(" params? ")" "->" expr -> lambda
        | "[" args? "]" -> list
        | "(" expr ")"
        | INT | FLOAT | STRING | NAME | QUALIFIED
args: expr ("," expr)*

// TOKENS
QUALIFIED.2: /[A-Z][A-Za-z0-9_]*(\.[A-Z][A-Za-z0-9_]*)*\.[a-z_][A-Za-z0-9_]*[?!]?/
MODULE_NAME: /[A-Z][A-Za-z0-9_]*(\.[A-Z][A-Za-z0-9_]*)*/
NAME: /[a-z_][A-Za-z0-9_]*[?!]?/
STRING: /"(?:[^"\\\n]|\\.)*"/
FLOAT.2: /\d+\.\d+(?:[eE][+-]?\d+)?/
INT: /\d+/
EQ: "=="
NE: "!="
LE: "<="
GE: ">="
LT: "<"
GT: ">"
CONCAT: "++"
PLUS: "+"
MINUS: "-"
STAR: "*"
SLASH: "/"
_SEP: /[;\n]/

// COMMENTS & WHITESPACE
COMMENT: /#[^\n]*/
%ignore COMMENT
%ignore /[ \t\f\r]+/
%ignore /\\\r?\n/
"""

CONSTANTS = {'nil': None, 'true': True, 'false': False}

BINARY_OPERATORS = ('==', '!=', '<=', '>=', '<', '>', '++', '+', '-', '*', '/')


@lru_cache(maxsize=1)
def _parser() -> lark.Lark:
    return lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="contextual", propagate_positions=True)


def _is_tree(node, data_: str) -> bool: return isinstance(node, lark.Tree) and node.data == data_


def _params(node) -> list[str]:
    return [str(t) for t in node.children] if _is_tree(node, 'params') else []


def _args(children) -> list:
    return [_expr(e) for ch in children if _is_tree(ch, 'args') for e in ch.children]


def _expr(node) -> list:
    """Convert a parse tree into nested lists, which serialize as JSON without extra work."""
    if isinstance(node, lark.Token):
        match node.type:
            case 'INT': return ['lit', int(node.value)]
            case 'FLOAT': return ['lit', float(node.value)]
            case 'STRING': return ['lit', ast.literal_eval(node.value)]
            case 'NAME' if node.value in CONSTANTS: return ['lit', CONSTANTS[node.value]]
            case 'NAME' | 'QUALIFIED': return ['var', node.value]
        raise NotImplementedError(f"Unexpected token {node.type} from parser.")

    match node.data:
        case 'call':
            name, *rest = node.children
            return ['call', name.value, _args(rest)]
        case 'list':
            return ['list', _args(node.children)]
        case 'lambda':
            *params, body = node.children
            return ['fn', _params(params[0]) if params else [], _expr(body)]
        case 'neg':
            return ['neg', _expr(node.children[-1])]
        case 'comparison' | 'sum' | 'product':
            # Operators are left-associative: a - b - c == (a - b) - c
            lhs, rest = _expr(node.children[0]), node.children[1:]
            for op, rhs in zip(rest[::2], rest[1::2]):
                lhs = ['op', op.value, lhs, _expr(rhs)]
            return lhs
    raise NotImplementedError(f"Unexpected tree `{node.data}` from parser.")


def _statement(node: lark.Tree, filename) -> dict:
    line = node.meta.line if not node.meta.empty else None
    children = node.children
    match node.data:
        case 'module_decl':
            return {'kind': 'module', 'name': children[0].value, 'line': line}
        case 'doc_decl':
            return {'kind': 'doc', 'text': ast.literal_eval(children[0].value), 'line': line}
        case 'def_decl':
            name, *params, body = children
            return {'kind': 'def', 'name': name.value, 'params': _params(params[0]) if params else [],
                    'body': _expr(body), 'line': line}
        case 'assign':
            return {'kind': 'assign', 'name': children[0].value, 'value': _expr(children[1]), 'line': line}
        case 'expr_stmt':
            return {'kind': 'expr', 'value': _expr(children[0]), 'line': line}
    raise NotImplementedError(f"Unexpected statement `{node.data}` in {filename}.")


def parse(source: str, filename=None):
    """Yield one dict per statement in `source`, in order."""
    try:
        tree = _parser().parse(source)
    except (lark.exceptions.UnexpectedInput, lark.exceptions.ParseError) as exc:
        def attr(k): return getattr(exc, k, None)
        token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''
        error_class = EmberIncompleteParse if isinstance(exc, lark.exceptions.UnexpectedEOF) or (token is not None and token.type == '$END') else EmberParseError
        raise error_class(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None

    for node in tree.children:
        if isinstance(node, lark.Tree):
            yield _statement(node, filename)


def format_parse_error_context(filename, line, column, token_value, source=None):
    lines = source.splitlines(keepends=True) if source is not None else open(filename, 'r').readlines()
    if not line or line < 1:
        return f"\033[97m  File \"{filename}\"\033[0m"
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{filename}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i].rstrip('\n')
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            width = max(1, len(token_value or ''))
            if column and 0 < column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+width-1]}\033[0m" +
                    line_content[column+width-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n'.join(result)
