"""Test the tower_sim.control_tower module."""
import unittest

from tower_sim.control_tower import ControlTower
from tower_sim.exceptions import BookkeepingError, NoSuitableGateError
from tower_sim.types import (
    AircraftCharacteristics,
    AirplaneTerminal,
    FreightAircraft,
    Gate,
    HelicopterTerminal,
    PassengerAircraft,
    Task,
    TaskList,
    TaskType,
)


def landing_tasks():
    return TaskList(
        [
            Task(TaskType.LAND),
            Task(TaskType.WAIT),
            Task(TaskType.LOAD, 75),
            Task(TaskType.TAKEOFF),
            Task(TaskType.AWAY),
            Task(TaskType.AWAY),
        ]
    )


def make_terminal(terminal_class=AirplaneTerminal, number=1, num_gates=1):
    terminal = terminal_class(number)
    for gate_number in range(1, num_gates + 1):
        terminal.add_gate(Gate(gate_number))
    return terminal


class TestControlTowerTick(unittest.TestCase):
    def setUp(self):
        self.a320 = AircraftCharacteristics.AIRBUS_A320
        self.aircraft = PassengerAircraft("QFA481", self.a320, landing_tasks(), 1000.0, 132)
        self.terminal = make_terminal()

        self.tower = ControlTower()
        self.tower.add_terminal(self.terminal)
        self.tower.add_aircraft(self.aircraft)

    def test_initial_placement(self):
        self.assertEqual(self.tower.ticks_elapsed, 0)
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.aircraft))
        self.assertFalse(self.terminal.gates[0].is_occupied)

    def test_first_tick_does_not_land(self):
        self.tower.tick()

        self.assertEqual(self.tower.ticks_elapsed, 1)
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.LAND)
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.aircraft))

    def test_second_tick_lands(self):
        self.tower.tick()
        self.tower.tick()

        self.assertEqual(self.tower.ticks_elapsed, 2)
        self.assertIs(self.terminal.gates[0].aircraft_at_gate, self.aircraft)
        self.assertEqual(self.aircraft.num_passengers, 0)
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.WAIT)
        self.assertIsNone(self.tower.landing_queue.peek_aircraft())

    def test_full_cycle(self):
        # 75% of 150 passengers takes two ticks to load
        self.assertEqual(self.aircraft.loading_time, 2)

        for _ in range(3):
            self.tower.tick()
        # WAIT is completed automatically, and the aircraft starts loading
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.LOAD)
        self.assertEqual(self.tower.loading_aircraft, {self.aircraft: 2})

        self.tower.tick()
        self.assertEqual(self.tower.loading_aircraft, {self.aircraft: 1})
        self.assertAlmostEqual(self.aircraft.fuel_amount, 1000.0 + self.a320.fuel_capacity / 2)

        self.tower.tick()
        # Loading is done: the gate is free and the aircraft waits to take off
        self.assertEqual(self.tower.loading_aircraft, {})
        self.assertFalse(self.terminal.gates[0].is_occupied)
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.TAKEOFF)
        self.assertTrue(self.tower.takeoff_queue.contains_aircraft(self.aircraft))
        self.assertAlmostEqual(self.aircraft.fuel_amount, self.a320.fuel_capacity)

        self.tower.tick()
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.AWAY)
        self.assertIsNone(self.tower.takeoff_queue.peek_aircraft())

        self.tower.tick()
        self.tower.tick()
        # Two ticks AWAY burn 20% of capacity and bring the aircraft back to LAND
        self.assertAlmostEqual(self.aircraft.fuel_amount, 0.8 * self.a320.fuel_capacity)
        self.assertEqual(self.aircraft.task_list.current_task.type, TaskType.LAND)
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.aircraft))
        self.assertEqual(self.tower.ticks_elapsed, 8)

    def test_landing_ticks_count_from_commencement(self):
        tower = ControlTower(ticks_elapsed=7)
        self.assertEqual(tower.ticks_at_commencement, 7)
        self.assertFalse(tower.is_landing_tick)
        tower.tick()
        self.assertTrue(tower.is_landing_tick)
        tower.tick()
        self.assertFalse(tower.is_landing_tick)


class TestControlTowerRunway(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.terminal = make_terminal(num_gates=2)
        self.tower.add_terminal(self.terminal)

        chars = AircraftCharacteristics
        self.freight = FreightAircraft(
            "UPS119", chars.BOEING_747_8F, landing_tasks(), 100000.0, 5000
        )
        self.emergency = PassengerAircraft(
            "VOZ123", chars.FOKKER_100, landing_tasks(), 5000.0, 50, emergency=True
        )
        self.departing = PassengerAircraft(
            "QFA481",
            chars.AIRBUS_A320,
            TaskList(
                [
                    Task(TaskType.TAKEOFF),
                    Task(TaskType.AWAY),
                    Task(TaskType.LAND),
                    Task(TaskType.LOAD),
                ]
            ),
            20000.0,
            100,
        )

    def skip_to_landing_tick(self):
        self.tower.tick()
        self.assertTrue(self.tower.is_landing_tick)

    def test_two_aircraft_land_on_a_landing_tick(self):
        self.skip_to_landing_tick()
        self.tower.add_aircraft(self.freight)
        self.tower.add_aircraft(self.emergency)
        self.tower.add_aircraft(self.departing)

        self.tower.tick()
        gates = self.terminal.gates
        # The emergency lands first, so it gets the first gate
        self.assertIs(gates[0].aircraft_at_gate, self.emergency)
        self.assertIs(gates[1].aircraft_at_gate, self.freight)
        self.assertEqual(len(self.tower.landing_queue), 0)
        # Nobody took off, since aircraft landed
        self.assertTrue(self.tower.takeoff_queue.contains_aircraft(self.departing))

    def test_take_off_when_nothing_can_land(self):
        self.terminal.declare_emergency()
        self.skip_to_landing_tick()
        self.tower.add_aircraft(self.freight)
        self.tower.add_aircraft(self.departing)

        self.tower.tick()
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.freight))
        self.assertFalse(self.tower.takeoff_queue.contains_aircraft(self.departing))
        self.assertEqual(self.departing.task_list.current_task.type, TaskType.AWAY)

    def test_take_off_on_other_ticks(self):
        self.tower.add_aircraft(self.freight)
        self.tower.add_aircraft(self.departing)

        self.tower.tick()
        self.assertEqual(self.departing.task_list.current_task.type, TaskType.AWAY)
        # Landing is not attempted on the first tick
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.freight))

    def test_land_when_queue_empty(self):
        self.assertFalse(self.tower.try_land_aircraft())

    def test_take_off_when_queue_empty(self):
        self.tower.try_take_off_aircraft()
        self.assertEqual(len(self.tower.takeoff_queue), 0)

    def test_gate_reported_free_but_occupied(self):
        self.tower.add_aircraft(self.freight)
        occupied = Gate(9, aircraft_at_gate=self.departing)
        self.terminal.find_unoccupied_gate = lambda: occupied

        with self.assertRaises(BookkeepingError):
            self.tower.try_land_aircraft()

        # Nothing was applied: the aircraft is still waiting to land
        self.assertTrue(self.tower.landing_queue.contains_aircraft(self.freight))
        self.assertEqual(self.freight.task_list.current_task.type, TaskType.LAND)
        self.assertEqual(self.freight.freight_amount, 5000)
        self.assertIsNone(self.tower.find_gate_of_aircraft(self.freight))


class TestControlTowerGates(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.helicopter = PassengerAircraft(
            "VH-BFK",
            AircraftCharacteristics.ROBINSON_R44,
            TaskList([Task(TaskType.WAIT), Task(TaskType.LOAD, 50), Task(TaskType.TAKEOFF),
                      Task(TaskType.AWAY), Task(TaskType.LAND)]),
            100.0,
            2,
        )

    def test_find_unoccupied_gate_skips_unsuitable_terminals(self):
        airplane_terminal = make_terminal(AirplaneTerminal, 1)
        emergency_terminal = make_terminal(HelicopterTerminal, 2)
        emergency_terminal.declare_emergency()
        full_terminal = make_terminal(HelicopterTerminal, 3, num_gates=0)
        open_terminal = make_terminal(HelicopterTerminal, 4, num_gates=2)
        for terminal in [airplane_terminal, emergency_terminal, full_terminal, open_terminal]:
            self.tower.add_terminal(terminal)

        self.assertIs(self.tower.find_unoccupied_gate(self.helicopter), open_terminal.gates[0])

    def test_find_unoccupied_gate_none(self):
        self.assertIsNone(self.tower.find_unoccupied_gate(self.helicopter))
        self.tower.add_terminal(make_terminal(AirplaneTerminal, 1))
        self.assertIsNone(self.tower.find_unoccupied_gate(self.helicopter))

    def test_add_grounded_aircraft_parks_it(self):
        terminal = make_terminal(HelicopterTerminal, 1)
        self.tower.add_terminal(terminal)
        self.tower.add_aircraft(self.helicopter)

        self.assertIs(terminal.gates[0].aircraft_at_gate, self.helicopter)
        self.assertIs(self.tower.find_gate_of_aircraft(self.helicopter), terminal.gates[0])
        self.assertEqual(self.tower.aircraft, [self.helicopter])

    def test_add_loading_aircraft_joins_loading_map(self):
        self.helicopter.task_list.move_to_next_task()
        self.tower.add_terminal(make_terminal(HelicopterTerminal, 1))
        self.tower.add_aircraft(self.helicopter)
        self.assertEqual(self.tower.loading_aircraft, {self.helicopter: 1})

    def test_add_grounded_aircraft_without_gate(self):
        self.tower.add_terminal(make_terminal(AirplaneTerminal, 1))
        with self.assertRaises(NoSuitableGateError):
            self.tower.add_aircraft(self.helicopter)
        self.assertEqual(self.tower.aircraft, [])

    def test_find_gate_of_aircraft_not_parked(self):
        self.tower.add_terminal(make_terminal(HelicopterTerminal, 1))
        self.assertIsNone(self.tower.find_gate_of_aircraft(self.helicopter))


class TestControlTowerLoading(unittest.TestCase):
    def setUp(self):
        self.tower = ControlTower()
        self.terminal = make_terminal(num_gates=2)
        self.tower.add_terminal(self.terminal)

        def loading(callsign):
            return FreightAircraft(
                callsign,
                AircraftCharacteristics.BOEING_747_8F,
                TaskList([Task(TaskType.LOAD, 50), Task(TaskType.TAKEOFF),
                          Task(TaskType.AWAY), Task(TaskType.LAND)]),
                0.0,
                0,
            )

        self.first = loading("ABC101")
        self.second = loading("DEF102")
        self.tower.add_aircraft(self.second)
        self.tower.add_aircraft(self.first)

    def test_loading_counts_down_and_releases_gate(self):
        # 50% of 137756 kg is more than 50000 kg, so loading takes three ticks
        self.assertEqual(self.tower.loading_aircraft, {self.first: 3, self.second: 3})
        self.tower.loading_aircraft[self.second] = 1

        self.tower.load_aircraft()
        self.assertEqual(self.tower.loading_aircraft, {self.first: 2})
        self.assertIsNone(self.tower.find_gate_of_aircraft(self.second))
        self.assertEqual(self.second.task_list.current_task.type, TaskType.TAKEOFF)
        self.assertIsNotNone(self.tower.find_gate_of_aircraft(self.first))

    def test_loading_aircraft_not_at_gate(self):
        gate = self.tower.find_gate_of_aircraft(self.first)
        gate.aircraft_leaves()
        self.tower.loading_aircraft[self.first] = 1

        with self.assertLogs("tower_sim.control_tower", level="WARNING"):
            self.tower.load_aircraft()
        self.assertNotIn(self.first, self.tower.loading_aircraft)
        self.assertEqual(self.first.task_list.current_task.type, TaskType.TAKEOFF)

    def test_placement_is_idempotent(self):
        self.tower.loading_aircraft[self.first] = 1
        self.tower.place_all_aircraft_in_queues()
        self.tower.place_all_aircraft_in_queues()
        # Aircraft already loading keep their remaining ticks
        self.assertEqual(self.tower.loading_aircraft, {self.first: 1, self.second: 3})

        self.first.task_list.move_to_next_task()
        del self.tower.loading_aircraft[self.first]
        self.tower.place_all_aircraft_in_queues()
        self.tower.place_all_aircraft_in_queues()
        self.assertEqual(len(self.tower.takeoff_queue), 1)

    def test_str_and_snapshot(self):
        self.assertEqual(
            str(self.tower),
            "ControlTower: 1 terminals, 2 total aircraft (0 LAND, 0 TAKEOFF, 2 LOAD)",
        )
        self.assertEqual(
            self.tower.snapshot(),
            {
                "tick": 0,
                "landing": 0,
                "takeoff": 0,
                "loading": 2,
                "aircraft": 2,
                "occupied_gates": 2,
            },
        )

    def test_queue_members(self):
        self.assertEqual(
            self.tower.queue_members(),
            {
                "TakeoffQueue": [],
                "LandingQueue": [],
                "LoadingAircraft": {"ABC101": 3, "DEF102": 3},
            },
        )
        self.assertEqual(
            self.tower.encode_queues(),
            "TakeoffQueue:0\n\nLandingQueue:0\n\nLoadingAircraft:2\nABC101:3,DEF102:3",
        )


if __name__ == "__main__":
    unittest.main()
