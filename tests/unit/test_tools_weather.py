import httpx

from react_loop.tools.registry import ToolRegistry
from react_loop.tools.weather import WEATHER_TOOL_NAME, WeatherParams, WeatherTool


def build_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def open_meteo_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "geocoding-api.open-meteo.com":
        return httpx.Response(
            200,
            json={
                "results": [
                    {"name": "Shenzhen", "country_code": "CN", "latitude": 22.5, "longitude": 114.1, "population": 10},
                    {"name": "Shenzhen Big", "country_code": "CN", "latitude": 22.6, "longitude": 114.0, "population": 100},
                ]
            },
        )
    assert request.url.params["latitude"] == "22.6"
    assert request.url.params["temperature_unit"] == "celsius"
    return httpx.Response(
        200,
        json={
            "current": {
                "temperature_2m": 22.0,
                "apparent_temperature": 23.5,
                "relative_humidity_2m": 70,
                "wind_speed_10m": 8.2,
                "weather_code": 0,
            }
        },
    )


def test_weather_reports_current_conditions():
    tool = WeatherTool(client=build_client(open_meteo_handler))
    text = tool.run(WeatherParams(location="Shenzhen"))
    assert text.startswith("Shenzhen Big, CN: 22.0°C")
    assert "clear sky" in text
    assert "humidity 70%" in text
    assert "wind 8.2 km/h" in text


def test_weather_passes_country_code():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "geocoding-api.open-meteo.com":
            seen.update(request.url.params)
        return open_meteo_handler(request)

    WeatherTool(client=build_client(handler)).run(WeatherParams(location="Shenzhen, cn"))
    assert seen["name"] == "Shenzhen"
    assert seen["country_code"] == "CN"


def test_unknown_location_becomes_observation_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": []})

    registry = ToolRegistry([WeatherTool(client=build_client(handler))])
    result = registry.invoke(WEATHER_TOOL_NAME, '{"location": "Atlantis"}')
    assert not result.ok
    assert "Could not geocode location: Atlantis" in result.output


def test_http_errors_become_observation_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "down"})

    registry = ToolRegistry([WeatherTool(client=build_client(handler))])
    result = registry.invoke(WEATHER_TOOL_NAME, '{"location": "Paris"}')
    assert not result.ok
    assert result.output.startswith(f"Tool '{WEATHER_TOOL_NAME}' failed:")


def test_weather_rejects_bad_units():
    registry = ToolRegistry([WeatherTool(client=build_client(open_meteo_handler))])
    result = registry.invoke(WEATHER_TOOL_NAME, '{"location": "Paris", "units": "kelvin"}')
    assert result.output.startswith(f"Error parsing {WEATHER_TOOL_NAME} parameters:")
