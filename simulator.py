"""Interactive CLI simulator — exercise the OTP flow against a local server."""

import asyncio

import httpx
import uvicorn

from otp_guard.main import app

BLUE = "\033[94m"
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

BASE_URL = "http://127.0.0.1:8000/api/otp"
PURPOSES = ("user-activation", "seller-activation", "forgot-password-user", "forgot-password-seller")


def _print_reply(resp: httpx.Response) -> None:
    data = resp.json()
    colour = GREEN if resp.status_code == 200 else RED
    print(f"{colour}{BOLD}[{resp.status_code}]{RESET} {data.get('message', data)}\n")


async def main() -> None:
    print(f"\n{BOLD}{'=' * 52}")
    print("  🔐  OTP Guard — Flow Simulator")
    print(f"{'=' * 52}{RESET}\n")

    print(f"{DIM}Commands: 'send' request a code, any 4 digits to verify,{RESET}")
    print(f"{DIM}          'switch' to change email, 'quit' to exit{RESET}")
    print(f"{DIM}Without SMTP settings, codes are printed in the server logs{RESET}\n")

    email = input(f"{YELLOW}Email to simulate: {RESET}").strip() or "alice@example.com"
    purpose = input(f"{YELLOW}Purpose {PURPOSES}: {RESET}").strip() or PURPOSES[0]
    print(f"{DIM}Simulating {purpose} for {email}{RESET}\n")

    # ── Start the API in the background (needs a running Redis) ─
    config = uvicorn.Config(app, host="127.0.0.1", port=8000, log_level="info")
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve())
    await asyncio.sleep(0.5)

    async with httpx.AsyncClient(base_url=BASE_URL) as client:
        while True:
            try:
                user_input = input(f"{BLUE}{BOLD}>{RESET} ").strip()
            except (KeyboardInterrupt, EOFError):
                print(f"\n{DIM}Goodbye!{RESET}")
                break

            if not user_input:
                continue

            if user_input.lower() == "quit":
                print(f"{DIM}Goodbye!{RESET}")
                break

            if user_input.lower() == "switch":
                email = input(f"{YELLOW}New email: {RESET}").strip()
                print(f"{DIM}Switched to {email}{RESET}\n")
                continue

            if user_input.lower() == "send":
                resp = await client.post(
                    "/request",
                    json={"name": email.split("@")[0], "email": email, "purpose": purpose},
                )
            else:
                resp = await client.post("/verify", json={"email": email, "otp": user_input})

            _print_reply(resp)

    server.should_exit = True
    await server_task


if __name__ == "__main__":
    asyncio.run(main())
