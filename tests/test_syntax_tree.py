import pytest

from pyminishell.syntax import ShellSyntaxError
from pyminishell.syntax_tree import FileType, Node, parse, to_dot, write_dot
from pyminishell.tokenizer import Token, TokenType, tokenize

W = TokenType.WORD


def cmd(*args):
    return Node(W, args=list(args))


def test_empty_tokens_give_none():
    assert parse([]) is None


def test_simple_command():
    assert parse(tokenize("ls -l")) == cmd("ls", "-l")


def test_single_pipe():
    tree = parse(tokenize("ls | wc -l"))
    assert tree == Node(TokenType.PIPE, left=cmd("ls"), right=cmd("wc", "-l"))


def test_pipes_nest_to_the_right():
    tree = parse(tokenize("a | b | c"))
    assert tree.type is TokenType.PIPE
    assert tree.left == cmd("a")
    assert tree.right == Node(TokenType.PIPE, left=cmd("b"), right=cmd("c"))


def test_first_redirection_is_root():
    tree = parse(tokenize("cat < in > out"))
    assert tree == Node(
        TokenType.REDIR_IN,
        left=Node(TokenType.REDIR_OUT, left=cmd("cat"), right=cmd("out")),
        right=cmd("in"),
    )


def test_leading_redirection():
    tree = parse(tokenize("> out echo hi"))
    assert tree == Node(TokenType.REDIR_OUT, left=cmd("echo", "hi"), right=cmd("out"))


def test_words_after_redirection_join_command():
    tree = parse(tokenize("echo a > out b"))
    assert tree.left == cmd("echo", "a", "b")
    assert tree.right == cmd("out")


def test_heredoc_node():
    tree = parse(tokenize("cat << EOF"))
    assert tree.type is TokenType.REDIR_HEREDOC
    assert tree.right.args == ["EOF"]
    assert tree.left == cmd("cat")


def test_redirection_within_pipeline():
    tree = parse(tokenize("ls > f | wc"))
    assert tree.left == Node(TokenType.REDIR_OUT, left=cmd("ls"), right=cmd("f"))
    assert tree.right == cmd("wc")


def test_new_nodes_have_no_file_type():
    tree = parse(tokenize("ls > f"))
    assert {tree.file_type, tree.left.file_type, tree.right.file_type} == {FileType.NONE}


def test_dangling_redirection_raises():
    with pytest.raises(ShellSyntaxError):
        parse([Token(TokenType.REDIR_OUT, ">")])


def test_dot_of_empty_tree():
    assert to_dot(None) == "digraph AST {\n}\n"


def test_dot_of_pipeline():
    tree = parse(tokenize("ls | wc"))
    lines = to_dot(tree).splitlines()
    assert lines[0] == "digraph AST {"
    assert lines[-1] == "}"
    declarations = [line for line in lines[1:-1] if "->" not in line]
    edges = [line for line in lines[1:-1] if "->" in line]
    assert len(declarations) == 3
    assert sum('[label="L"]' in e for e in edges) == 1
    assert sum('[label="R"]' in e for e in edges) == 1
    assert any('label="|"' in d for d in declarations)
    assert any('label="CMD: ls"' in d for d in declarations)


def test_dot_labels_redirections():
    tree = parse(tokenize("cat > out"))
    text = to_dot(tree)
    assert 'label="REDIR: "' in text
    assert 'label="CMD: out"' in text


def test_dot_escapes_special_characters():
    tree = cmd('say "hi"\\', "a\nb")
    text = to_dot(tree)
    assert 'label="CMD: say \\"hi\\"\\\\ a\\nb"' in text


def test_write_dot(tmp_path):
    tree = parse(tokenize("echo a | cat > out"))
    target = tmp_path / "tree.dot"
    write_dot(tree, target)
    assert target.read_text(encoding="utf-8") == to_dot(tree)