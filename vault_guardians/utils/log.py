from colorama import Fore, Style


def h1(msg):
    print(
        f"\n\n{Fore.CYAN}-------------------------------------------------------------------------")
    print(f"{Fore.CYAN}{msg}{Style.RESET_ALL}\n")


def h2(msg):
    print(f"\n{Fore.LIGHTBLUE_EX}▸ {msg}{Style.RESET_ALL}\n")


def h3(msg):
    print(f"\t{Fore.GREEN}{msg}{Style.RESET_ALL}")


def error(msg):
    print(f"{Fore.RED}{msg}{Style.RESET_ALL}")


def info(msg):
    print(msg)


def amount(label, value, decimals=18):
    # prints a raw token amount next to its human readable value
    whole = value / (10 ** decimals)
    print(f"\t{label:<24}{Fore.YELLOW}{whole:,.6f}{Style.RESET_ALL} ({value})")


# transaction tracing (environment)


def tx(label, fn_name, sender):
    print(f"\t{Fore.GREEN}✓ {label}.{fn_name}{Style.RESET_ALL} {Style.DIM}from {sender}{Style.RESET_ALL}")


def revert(label, fn_name, reason):
    print(f"\t{Fore.RED}✗ {label}.{fn_name} reverted: {reason}{Style.RESET_ALL}")
