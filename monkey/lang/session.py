"""Session control for the Monkey interpreter: the pipeline source -> Lexer -> Parser -> evaluate, with one persistent
Environment so that let bindings survive from one input to the next. Used both for running files and by the shell.
"""

from monkey.lang.error import GenericException, ParseError
from monkey.runtime.environment import Environment
from monkey.runtime.evaluator import evaluate
from monkey.runtime.object import NULL, ObjectType
from monkey.syntax import ast
from monkey.syntax.lexer import Lexer
from monkey.syntax.parser import Parser
from monkey.syntax.token import TokenType


class Session:
    """Governs a Monkey session, with control over the global scope."""
    SH_FILE = "<in>"  # command-line interpreter filename
    OPENERS = {"(": ")", "{": "}"}

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()
        self.to_exec = {}   # dict of line num: Programs to evaluate
        self.results = []   # (program, value) pairs, most recent last

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, prev=""):
        """Removes trailing whitespace from line (appended to prev, the unfinished input so far). Returns the updated
        line and whether a line continuation is necessary, i.e. whether a "(" or "{" is still open.
        """
        line = (prev + "\n" + line if prev else line).rstrip()

        balance = 0
        for char in line:
            if char in Session.OPENERS:
                balance += 1
            elif char in Session.OPENERS.values():
                balance -= 1

        return line, balance > 0

    def parse(self, source):
        """Parses source into a Program. Raises a ParseError carrying every syntax error if there are any."""
        parser = Parser(Lexer(source))
        program = parser.parse_program()

        if parser.errors:
            raise ParseError(parser.errors, source)
        return program

    def add(self, source, line_num):
        """Parses source and queues it for evaluation. Evaluation is delayed until run is called. Raises ValueError if
        source is empty.
        """
        if not source or source.isspace():
            raise ValueError("source cannot be empty")

        self.error_handler.register_line(self.path, source.strip().splitlines()[0], line_num)  # in case of error

        program = self.parse(source)
        self.error_handler.debug("program", str(program))
        self.error_handler.debug("tree", "\n" + program.display())
        self.to_exec[line_num] = program

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's queued programs in order, appending their values to self.results. In file mode,
        an evaluation error is raised as a GenericException.
        """
        for line_num, program in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, str(program), line_num)

            try:
                value = evaluate(program, self.env)
            finally:
                del self.to_exec[line_num]

            self.results.append((program, value))
            if value.type == ObjectType.ERROR and not self.cmd_line:
                raise GenericException("{}", value.message, diagnosis=False)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the latest result, or None if it should not be displayed (a program ending in a let
        binding that succeeded has no value worth showing).
        """
        program, value = self.results.pop()
        if value is NULL and program.statements and isinstance(program.statements[-1], ast.LetStatement):
            return None
        return value

    def tokens(self, source):
        """Returns the tokens of source, warning about each illegal character."""
        lexer = Lexer(source)
        tokens = []

        token = lexer.next_token()
        while token.kind is not TokenType.EOF:
            if token.kind is TokenType.ILLEGAL:
                start = lexer.position - 1
                self.error_handler.warn("illegal character in '{}'", source, start=start, end=start + 1)
            tokens.append(token)
            token = lexer.next_token()
        return tokens
