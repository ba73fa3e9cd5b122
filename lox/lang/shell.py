"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMANDS = {"exit", "help"}

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def onecmd(self, line):
        # only a bare command word is a command, anything else (including continuation lines) is lox source
        if line == "EOF" or (not self._tmp_line and line.strip() in Shell.COMMANDS):
            return super().onecmd(line.strip())
        if not line.strip() and not self._tmp_line:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Runs an arbitrary lox entry, or buffers it while a block is still open."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
            else:
                self._tmp_line = ""
                self.prompt = self._tmp_prompt
                self.sess.run(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with C-like syntax: numbers, \n"
              "strings, booleans and nil, variables, if/while/for, and first-class functions \n"
              "with closures.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. Next, try typing \n"
              "'print greeting;'. Definitions persist for the rest of the session. An entry \n"
              "with an unclosed '{' continues on the next line.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
