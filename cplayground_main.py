"""
CPlayground - Interactive Menu

Main user interface for the learning platform.
Features:
- Sign up / log in / show registered users
- Platform home once logged in
- Number-guessing game and a short quiz (both update your statistics)
- Profile with games played/won, quizzes passed, last login
"""

import getpass
import os
import random

from cplayground import auth
from cplayground.config import NEVER, Config, configure_logging
from cplayground.store import CredentialStore


def clear_screen():
    os.system("cls" if os.name == "nt" else "clear")


def pause():
    input("\nPress Enter to continue...")


def print_users(records):
    if not records:
        print("No users registered.")
        return
    print(f"{'Username':<22}  {'Games':>5}  {'Won':>5}  {'Quizzes':>7}  {'Last login'}")
    print("-" * 70)
    for r in records:
        print(f"{r.username:<22}  {r.games_played:>5}  {r.games_won:>5}  {r.quizzes_passed:>7}  {r.last_login or NEVER}")


# =============================================================================
# STARTUP COMMANDS
# =============================================================================

def cmd_signup(store):
    clear_screen()
    print("=== Sign Up ===\n")
    username = input("Choose a username: ").strip()
    password = getpass.getpass("Choose a password: ")
    result = auth.signup(store, username, password)
    if not result.ok:
        print(f"\n{result.message}")
        pause()
        return False
    print("\n✓ Signup successful! You can now log in.")
    return True


def cmd_login(session):
    clear_screen()
    print("=== Log In ===\n")
    username = input("Enter username: ").strip()
    password = getpass.getpass("Enter password: ")
    result = session.login(username, password)
    if not result.ok:
        print(f"\n{result.message}")
        pause()
        return False
    print(f"\n✓ Login successful. Welcome, {username}!")
    pause()
    return True


def cmd_show_users(store):
    clear_screen()
    print("=== Registered Users ===\n")
    print_users(auth.list_users(store))
    pause()


# =============================================================================
# PLATFORM COMMANDS
# =============================================================================

def cmd_number_guess(session):
    clear_screen()
    print("=== Guess the Number (1-100, 7 tries) ===\n")
    secret = random.randint(1, 100)
    won = False
    for attempt in range(1, 8):
        try:
            guess = int(input(f"Try {attempt}: ").strip())
        except ValueError:
            print("Numbers only.")
            continue
        if guess == secret:
            won = True
            break
        print("Higher." if guess < secret else "Lower.")
    print(f"\n{'✓ Correct!' if won else f'Out of tries. It was {secret}.'}")
    session.record_game_result(won)
    pause()


def cmd_quiz(session):
    clear_screen()
    print("=== Quick Quiz ===\n")
    print("Which header declares printf?")
    print("  1) stdlib.h\n  2) stdio.h\n  3) string.h")
    answer = input("\n> ").strip()
    if answer == "2":
        print("\n✓ Correct! Quiz passed.")
        session.record_quiz_pass()
    else:
        print("\n✗ Not quite: printf lives in stdio.h.")
    pause()


def cmd_profile(session):
    clear_screen()
    print(f"=== Profile: {session.username} ===\n")
    record = session.profile()
    if record is None:
        print("Profile not found.")
    else:
        print(f"  Games played: {record.games_played}")
        print(f"  Games won: {record.games_won}")
        print(f"  Quizzes completed: {record.quizzes_passed}")
        print(f"  Last login: {record.last_login or NEVER}")
    pause()


def platform_home(session):
    while session.authenticated:
        clear_screen()
        print(f"=== Welcome, {session.username} ===")
        print("\n 1) Guess the number")
        print(" 2) Quiz")
        print(" 3) Profile")
        print(" 4) Show users (admin)")
        print(" 0) Logout")
        c = input("\n> ").strip()
        if c == '1':
            cmd_number_guess(session)
        elif c == '2':
            cmd_quiz(session)
        elif c == '3':
            cmd_profile(session)
        elif c == '4':
            cmd_show_users(session.store)
        elif c == '0':
            print("\nLogging out...")
            session.logout()


def print_menu(store):
    print("CPlayground - Startup")
    print("=" * 40)
    print(f"Users file: {store.path}")
    print("\n 1) Sign up")
    print(" 2) Log in")
    print(" 3) Show users (admin)")
    print(" 0) Exit")


def main_menu(config=None):
    config = config or Config.from_env()
    configure_logging(config)
    store = CredentialStore.from_config(config)
    session = auth.Session(store)
    while True:
        clear_screen()
        print_menu(store)
        c = input("\n> ").strip()
        if c == '1':
            if cmd_signup(store):
                if input("Login now? (y/n): ").strip().lower().startswith('y'):
                    if cmd_login(session):
                        platform_home(session)
        elif c == '2':
            if cmd_login(session):
                platform_home(session)
        elif c == '3':
            cmd_show_users(store)
        elif c == '0':
            print("\nBye.")
            break


def main():
    try:
        main_menu()
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")


if __name__ == "__main__":
    main()
