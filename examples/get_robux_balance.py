from roboat import Client
import os

if __name__ == "__main__":
    # Cookie of the account to inspect, e.g. exported from the browser.
    roblosecurity = os.getenv("ROBOAT_ROBLOSECURITY")

    # Facade Pattern, Client is an entry point.
    client = Client(roblosecurity=roblosecurity)

    username = client.users.username()
    robux = client.economy.robux()

    print(f"Robux of {username}: {robux}")
