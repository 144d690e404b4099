"""
CPlayground - Guided Walkthrough (single run, no user input)

Run: python demo.py

This script simulates what a first-time user would see in the interactive
menu (`cplayground_main.py`) and explains what happens under the hood:
 - Hashing a password with the from-scratch SHA-256
 - Signing up (and trying to sign up twice)
 - Logging in with a wrong and a right password
 - Playing games / passing a quiz (statistics)
 - The user file on disk, line by line
 - A damaged line being skipped on load
 - A save that crashes halfway, and why nothing is lost

All steps print the UI-style output plus a short "behind the scenes" note.
"""

import os
import shutil
import tempfile
from textwrap import indent

from cplayground import auth, digest
from cplayground.store import CredentialStore


LINE = "=" * 70


def step(title: str, menu_option: str, code_path: str):
    print(f"\n{LINE}\n{title}  (menu option {menu_option}, code: {code_path})\n{LINE}")


def explain(title: str, body: str):
    print(f"\n[Behind the scenes] {title}")
    print(indent(body.strip(), "  "))


def show_file(path: str):
    with open(path, encoding="utf-8") as f:
        for line in f:
            print(f"  | {line.rstrip()}")


def main():
    step("CPlayground - Guided Walkthrough", "-", "cplayground_main.py")

    data_dir = tempfile.mkdtemp(prefix="cplayground-demo-")
    store = CredentialStore(os.path.join(data_dir, "users.db"))

    try:
        # 1) The digest engine
        step("Hashing a password", "-", "cplayground/digest.py:digest_hex")
        for text in ["", "abc", "secret1"]:
            print(f"  digest_hex({text!r}) = {digest.digest_hex(text)}")
        explain(
            "SHA-256 in four steps",
            "init() loads the 8 initial words; absorb() compresses every full 64-byte block; "
            "finalize() appends 0x80, zeros and the 64-bit bit count, then compresses the last block(s); "
            "hex_of() prints the 32 bytes as 64 lowercase hex characters.",
        )

        # 2) Sign up (option 1)
        step("Sign up", "1", "cplayground/auth.py:signup")
        result = auth.signup(store, "alice", "secret1")
        print(f"Prompts: username=alice, password=secret1 -> {'Signup successful!' if result.ok else result.message}")
        result = auth.signup(store, "alice", "another")
        print(f"Prompts: username=alice again -> {result.message} (reason: {result.reason.value})")
        auth.signup(store, "bob", "hunter2")
        explain(
            "What gets stored",
            "Only digest_hex(password) is written, never the password. Counters start at 0 "
            "and last_login is '-' until the first login.",
        )
        show_file(store.path)

        # 3) Log in (option 2)
        step("Log in", "2", "cplayground/auth.py:login")
        session = auth.Session(store)
        for name, password in [("alice", "wrong"), ("mallory", "secret1"), ("alice", "secret1")]:
            result = session.login(name, password)
            status = f"Welcome, {name}!" if result.ok else result.message
            reason = "" if result.ok else f"  [internal reason: {result.reason.value}]"
            print(f"  login({name!r}, {password!r}) -> {status}{reason}")
        explain(
            "Uniform failure message",
            "An unknown user and a wrong password print the same text, so the menu does not "
            "reveal which usernames exist. The reason code still tells them apart for logs.",
        )

        # 4) Statistics (platform home options 1 and 2)
        step("Games and quiz", "home 1 / 2", "cplayground/auth.py:record_game_result")
        session.record_game_result(won=True)
        session.record_game_result(won=False)
        session.record_quiz_pass()
        record = session.profile()
        print(f"Profile: games={record.games_played} won={record.games_won} "
              f"quizzes={record.quizzes_passed} last login={record.last_login}")
        show_file(store.path)
        explain(
            "Load, change, save",
            "Every statistic update reads the whole file, changes one record and rewrites the "
            "whole file. The file on disk is the only source of truth between operations.",
        )

        # 5) Damaged lines
        step("A damaged line", "-", "cplayground/store.py:load")
        with open(store.path, "a", encoding="utf-8") as f:
            f.write("lonelytoken\n\n   \n")
        print("Appended: 'lonelytoken', an empty line and a whitespace-only line")
        print(f"Loaded users: {[r.username for r in store.load()]}")
        explain(
            "Tolerant loading",
            "Lines with fewer than two fields are skipped silently; the next save drops them.",
        )

        # 6) Crash in the middle of a save
        step("Interrupted save", "-", "cplayground/store.py:save")
        with open(store.tmp_path, "w", encoding="utf-8") as f:
            f.write("alice 0000")
        print(f"A crash left a half-written {os.path.basename(store.tmp_path)} behind.")
        print(f"Loaded users: {[r.username for r in store.load()]}")
        session.record_quiz_pass()
        print(f"After the next save, {os.path.basename(store.tmp_path)} exists: {os.path.exists(store.tmp_path)}")
        explain(
            "Atomic replace",
            "save() writes users.db.tmp, flushes it, then os.replace()s it over users.db. "
            "Until the replace, readers see the previous complete file.",
        )

        # 7) Logout (home option 0)
        step("Logout", "home 0", "cplayground/auth.py:Session.logout")
        session.logout()
        print(f"Authenticated: {session.authenticated}")

    finally:
        shutil.rmtree(data_dir, ignore_errors=True)
        print(f"\nCleaned up temporary data directory {data_dir}")


if __name__ == "__main__":
    main()
