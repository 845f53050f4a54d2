import argparse
import os
import sys
import time

from gitlet import remote
from gitlet.config import SHORT_ID_LEN
from gitlet.errors import GitletError
from gitlet.log import setup_logging
from gitlet.merge import ALREADY_MERGED, FAST_FORWARD
from gitlet.repository import Repository

DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"


def format_commit(commit):
    lines = ["===", f"commit {commit.id}"]
    if commit.is_merge:
        lines.append("Merge: " + " ".join(p[:SHORT_ID_LEN] for p in commit.parents[:2]))
    date = time.strftime(DATE_FORMAT, time.localtime(commit.timestamp))
    lines.append(f"Date: {date}")
    lines.append(commit.message)
    return "\n".join(lines) + "\n"


def format_status(status):
    out = ["=== Branches ==="]
    for name in status.branches:
        out.append(f"*{name}" if name == status.current_branch else name)
    out += ["", "=== Staged Files ==="] + status.staged
    out += ["", "=== Removed Files ==="] + status.removed
    out += ["", "=== Modifications Not Staged For Commit ==="]
    out += [f"{name} ({kind})" for name, kind in status.modified]
    out += ["", "=== Untracked Files ==="] + status.untracked
    return "\n".join(out) + "\n"


def report_merge(result):
    if result.kind == ALREADY_MERGED:
        print("Given branch is an ancestor of the current branch.")
    elif result.kind == FAST_FORWARD:
        print("Current branch fast-forwarded.")
    else:
        for name in result.conflicts:
            print(f"Encountered a merge conflict in {name}.")
        if result.has_conflicts:
            print("Encountered a merge conflict.")


def cmd_init(work_tree, operands):
    Repository.init(work_tree)
    print("Initialized empty gitlet repository.")


def cmd_add(repo, operands):
    repo.add(operands[0])


def cmd_rm(repo, operands):
    repo.rm(operands[0])


def cmd_commit(repo, operands):
    commit = repo.commit(operands[0])
    print(f"Committed {commit.id[:SHORT_ID_LEN]}: {commit.message}")


def cmd_log(repo, operands):
    for commit in repo.log():
        print(format_commit(commit))


def cmd_global_log(repo, operands):
    for commit in repo.global_log():
        print(format_commit(commit))


def cmd_find(repo, operands):
    for commit_id in repo.find(operands[0]):
        print(commit_id)


def cmd_status(repo, operands):
    print(format_status(repo.status()))


def cmd_checkout(repo, operands):
    if len(operands) == 1:
        repo.checkout_branch(operands[0])
    elif len(operands) == 2 and operands[0] == "--":
        repo.checkout_file(operands[1])
    elif len(operands) == 3 and operands[1] == "--":
        repo.checkout_file_from_commit(operands[0], operands[2])
    else:
        raise GitletError("Incorrect operands.")


def cmd_branch(repo, operands):
    repo.branch(operands[0])


def cmd_rm_branch(repo, operands):
    repo.rm_branch(operands[0])


def cmd_reset(repo, operands):
    repo.reset(operands[0])


def cmd_merge(repo, operands):
    report_merge(repo.merge(operands[0]))


def cmd_add_remote(repo, operands):
    remote.add_remote(repo, operands[0], operands[1])


def cmd_rm_remote(repo, operands):
    remote.rm_remote(repo, operands[0])


def cmd_push(repo, operands):
    remote.push(repo, operands[0], operands[1])


def cmd_fetch(repo, operands):
    remote.fetch(repo, operands[0], operands[1])


def cmd_pull(repo, operands):
    report_merge(remote.pull(repo, operands[0], operands[1]))


# name -> (handler, accepted operand counts)
COMMANDS = {
    'init': (cmd_init, (0,)),
    'add': (cmd_add, (1,)),
    'rm': (cmd_rm, (1,)),
    'commit': (cmd_commit, (1,)),
    'log': (cmd_log, (0,)),
    'global-log': (cmd_global_log, (0,)),
    'find': (cmd_find, (1,)),
    'status': (cmd_status, (0,)),
    'checkout': (cmd_checkout, (1, 2, 3)),
    'branch': (cmd_branch, (1,)),
    'rm-branch': (cmd_rm_branch, (1,)),
    'reset': (cmd_reset, (1,)),
    'merge': (cmd_merge, (1,)),
    'add-remote': (cmd_add_remote, (2,)),
    'rm-remote': (cmd_rm_remote, (1,)),
    'push': (cmd_push, (2,)),
    'fetch': (cmd_fetch, (2,)),
    'pull': (cmd_pull, (2,)),
}


def build_parser():
    parser = argparse.ArgumentParser(prog="py-gitlet", description="gitlet version control")
    parser.add_argument('command', choices=list(COMMANDS), help='gitlet command')
    parser.add_argument('-C', dest='work_tree', default=os.getcwd(),
                        help='run as if started in this directory')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def split_operands(argv):
    """Separate global options and the command from its operands.

    argparse drops a literal ``--``, which ``checkout -- <file>`` relies on, so
    the operands never go through it.
    """
    i = 0
    while i < len(argv):
        if argv[i] == '-C':
            i += 2
            continue
        if not argv[i].startswith('-'):
            return argv[:i + 1], argv[i + 1:]
        i += 1
    return argv, []


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    head, operands = split_operands(list(argv))
    args = build_parser().parse_args(head)
    args.operands = operands
    setup_logging("DEBUG" if args.verbose else None)

    handler, arities = COMMANDS[args.command]
    try:
        if len(args.operands) not in arities:
            raise GitletError("Incorrect operands.")
        if args.command == 'init':
            handler(args.work_tree, args.operands)
        else:
            handler(Repository.open(args.work_tree), args.operands)
    except GitletError as e:
        print(e.text)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
