import time

from rich.pretty import pprint

from ramus import *

__prog__ = "forge"

forge = Command(name="forge", version="0.1.0", descr="build and ship small projects", shell=True)


@forge.command(
    shortcut="b",
    flags=[
        Flag("verbose", "v", descr="print every step"),
        Flag("jobs", "j", type=int, default=1, descr="parallel jobs"),
        Flag("profile", type=str, default="debug", descr="build profile"),
    ],
    positionals=[
        Positional("target", descr="what to build"),
        Positional("extras", required=False, variadic=True, descr="additional targets"),
    ],
)
def build(ctx):
    """build one or more targets"""
    targets = (ctx.arg("target"), *ctx.args("extras"))
    with ctx.spinner.interrupts():
        ctx.spinner.start("preparing %s" % ctx.flag("profile", str))
        for target in targets:
            time.sleep(0.3)
            if ctx.flag("verbose", bool):
                ctx.spinner.add_line("using %d job(s) for %s" % (ctx.flag("jobs", int), target))
            ctx.spinner.next_step("building %s" % target)
        time.sleep(0.3)
        ctx.spinner.succeed("built %d target(s)" % len(targets))


remote = Command(parent=forge, name="remote", descr="manage remotes")


@remote.command(name="list", aliases=["ls"])
def list_remotes(ctx):
    """list configured remotes"""
    pprint(ctx.data)


@forge.command(deprecated=True, replacement="build")
def make(ctx):
    """old name of build"""


if __name__ == '__main__':
    forge.execute(data={"origin": "https://example.invalid/forge.git"})
