"""Handles interactive/command-line mode for the Monkey interpreter. Uses cmd as backend."""

import cmd

from termcolor import colored

from monkey.lang.error import ErrorHandler
from monkey.runtime.object import ObjectType


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Monkey interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary Monkey input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.add(line, self.line_num)
            except ValueError:
                return  # if line is empty, terminate

            self.sess.run()

            if self.sess.results:
                value = self.sess.pop()
                if value is None:
                    return
                elif value.type == ObjectType.ERROR:
                    print(colored(value.inspect(), ErrorHandler.ERROR, attrs=["bold"]))
                else:
                    print(value.inspect())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Monkey interpreter!\n\n"
              "Monkey is a small expression-oriented language with integers, booleans, \n"
              "first-class functions and closures.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. This will bind a \n"
              "function to the name 'add'. Next, try typing 'add(1, 2)', giving 3 as \n"
              "the result. Bindings persist until you exit.")

    def do_tokens(self, arg):
        """Prints the tokens of the rest of the line."""
        for token in self.sess.tokens(arg):
            print(f"{token.kind.name:<10} {token.literal}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
