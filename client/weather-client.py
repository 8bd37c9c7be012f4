"""
Smoke client for the JSON-lines transport.

Spawns the server once per city, sends a single get-weather request and
prints the response. Hits the live Open-Meteo APIs.

Usage:
    python client/weather-client.py [CITY ...]
"""

import asyncio
import json
import sys

DEFAULT_CITIES = ["Fukuoka", "Tokyo", "Osaka", "Moscow", "New York"]
TIMEOUT_S = 30


async def test_city(city: str) -> dict:
    print(f"\n----- Testing city: {city} -----")
    request = {"type": "request", "id": "1", "tool": "get-weather", "params": {"city": city}}

    process = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "city_weather.server",
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate((json.dumps(request) + "\n").encode()),
            timeout=TIMEOUT_S,
        )
    except asyncio.TimeoutError:
        process.kill()
        return {"city": city, "success": False, "error": "Timeout"}

    print(f"Server exited with code {process.returncode}")
    for line in stdout.decode().splitlines():
        try:
            parsed = json.loads(line)
        except json.JSONDecodeError:
            continue
        if parsed.get("type") == "response":
            print("Response:", json.dumps(parsed, indent=2, ensure_ascii=False))
            return {"city": city, "success": True, "response": parsed}

    print("No valid response received")
    print("Stderr:", stderr.decode())
    return {"city": city, "success": False, "error": stderr.decode()}


async def main():
    cities = sys.argv[1:] or DEFAULT_CITIES
    results = [await test_city(city) for city in cities]

    print("\n===== Test Results Summary =====")
    for result in results:
        status = "OK" if result["success"] else "FAILED"
        print(f"{result['city']}: {status}")


if __name__ == "__main__":
    asyncio.run(main())
