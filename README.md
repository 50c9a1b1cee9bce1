# twinsamples

Sample providers and consumers for an in-vehicle digital twin. They model vehicle
signals and handle provider and consumer requests as plain async methods. They also
publish values to MQTT topics and stream image files from a directory.

## Installation

```
pip install twinsamples
```

To run the test suite, install the test extra:

```
pip install "twinsamples[test]"
pytest
```

## What is inside

- `twinsamples.messages` holds the request and response dataclasses, such as
  `SubscribeRequest`, `SetRequest`, `InvokeRequest`, `PublishRequest`,
  `TopicManagementRequest`, `CallbackPayload` and `StreamResponse`.
  - Failed calls raise `StatusError`, which carries a `StatusCode` and a message.
  - `StatusError.unimplemented`, `StatusError.invalid_argument` and
    `StatusError.internal` build the common cases.
- `twinsamples.vehicle` provides `Vehicle`, a small simulation of ambient air
  temperature, air conditioning and hybrid battery charge.
  - Each call to `execute_epoch()` advances it by one step.
  - The temperature stays between 65 and 100.
  - The A/C uses one unit of battery per step and switches off when the battery
    is empty.
- `twinsamples.signals` has helpers for the simulated signals:
  - `convert_dtmi_to_topic` turns a DTMI into an MQTT topic name. It raises
    `ValueError` if the scheme is not `dtmi`.
  - `temperature_values` yields a temperature that bounces between 65 and 85.
  - `crest_rows` yields the crest positions of the seat-massage wave.
    `massage_airbag_levels` gives the 18 airbag levels for one crest position.
  - `property_json` gives the compact JSON form of a property and its `$metadata`.
- `twinsamples.mixed` provides `MixedProvider` and `MixedConsumer`.
  - The provider records subscriptions in `subscription_map`.
  - It applies `IsAirConditioningActive` set requests to its `Vehicle`.
  - It answers show-notification invoke requests in a background task. The task
    reaches the consumer through the `connect_consumer` callable passed to the
    provider.
  - The consumer keeps what it receives in `published` and `responses`.
- `twinsamples.seat_massager` provides `SeatMassagerProvider` and
  `SeatMassagerConsumer` for the massage-airbags property.
  - A set request updates the levels.
  - A get request publishes the current levels to the consumer in a background
    task, through `connect_consumer`.
- `twinsamples.managed_subscribe` provides `ManagedSubscribeProvider`.
  - It starts publishing to a managed topic on a `PUBLISH` action and stops on a
    `STOP_PUBLISH` action.
  - Publishing happens at the `frequency_ms` constraint, or at `min_interval_ms`
    when no constraint is given.
  - Values come from a `TemperatureFeed`.
  - Messages go out through `publish_message`, which publishes with QoS 1 over
    MQTT. Any other callable with the same signature can take its place.
- `twinsamples.streaming` provides `StreamingProvider` and `ImageFileIterator`.
  - `stream()` returns an async iterator that cycles endlessly through the files
    in the image directory, in sorted order.
  - It waits `throttle_seconds` between items.
- `twinsamples.config` loads the streaming consumer and provider settings from YAML.
  - A path given without an extension also matches `.yaml` or `.yml`.

The provider and consumer classes that are not listed as handling a request raise
`StatusError` with `StatusCode.UNIMPLEMENTED` for it.

## Examples

Turning a DTMI into an MQTT topic:

```python
from twinsamples.signals import convert_dtmi_to_topic

convert_dtmi_to_topic("dtmi:sdv:HVAC:AmbientAirTemperature;1")
# 'sdv/HVAC/AmbientAirTemperature/1'
```

Running the vehicle simulation:

```python
from twinsamples.vehicle import Vehicle

vehicle = Vehicle()
vehicle.is_air_conditioning_active = True
vehicle.execute_epoch()
print(vehicle.ambient_air_temperature, vehicle.hybrid_battery_remaining)  # 74 99
```

Recording a subscription:

```python
import asyncio

from twinsamples.messages import SubscribeRequest
from twinsamples.mixed import MixedProvider

provider = MixedProvider()
asyncio.run(
    provider.subscribe(
        SubscribeRequest(
            entity_id="dtmi:sdv:HVAC:AmbientAirTemperature;1",
            consumer_uri="http://localhost:9000",
        )
    )
)
print(provider.subscription_map)
```

Loading streaming provider settings from a YAML file:

```python
from twinsamples.config import load_streaming_provider_settings

settings = load_streaming_provider_settings("streaming_provider_settings.yaml")
print(settings.provider_authority, settings.image_directory)
```

## What this package does not do

- It has no command-line programs.
- It has no network server. The providers and consumers are plain objects with
  async methods, and you serve them with the transport of your choice.
- It does not register entities with a digital twin service or discover providers
  through one.
- It has no MQTT subscriber. It only publishes, through `publish_message`.
- It does not decode or display the images it streams.