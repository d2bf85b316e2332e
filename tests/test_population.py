import numpy as np
import pytest

from epigrid.population import HealthState, Population, initialize_population

from conftest import I, U, make_pop


def test_single_initial_infection(rng):
    pop = initialize_population(500, 200, 50, rng)
    assert pop.state[0] == HealthState.INFECTED
    assert np.all(pop.state[1:] == HealthState.UNINFECTED)
    assert np.all(pop.time_sick == 0)
    assert pop.counts() == (1, 499, 0)


def test_first_num_moving_are_movers(rng):
    pop = initialize_population(100, 37, 20, rng)
    assert pop.is_moving[:37].all()
    assert not pop.is_moving[37:].any()


def test_positions_on_grid(rng):
    res = 25
    pop = initialize_population(2000, 0, res, rng)
    assert pop.gx.min() >= 0 and pop.gx.max() < res
    assert pop.gy.min() >= 0 and pop.gy.max() < res
    # x = k / res
    np.testing.assert_allclose(pop.xcoords * res, np.round(pop.xcoords * res))
    assert pop.pixel == pytest.approx(1 / res)
    # with 2000 draws over 25 columns every column shows up
    assert np.unique(pop.gx).size == res


def test_same_seed_same_population():
    a = initialize_population(50, 10, 30, np.random.default_rng(7))
    b = initialize_population(50, 10, 30, np.random.default_rng(7))
    np.testing.assert_array_equal(a.gx, b.gx)
    np.testing.assert_array_equal(a.gy, b.gy)


@pytest.mark.parametrize("num_people,num_moving,res", [
    (10, 11, 5),
    (10, -1, 5),
    (0, 0, 5),
    (10, 5, 0),
])
def test_bad_arguments_rejected(rng, num_people, num_moving, res):
    with pytest.raises(ValueError):
        initialize_population(num_people, num_moving, res, rng)


def test_from_coords_snaps_to_grid():
    pop = Population.from_coords([0.0, 0.5, 1.0], [0.25, 0.0, 1.0], [I, U, U], res=4)
    np.testing.assert_array_equal(pop.gx, [0, 2, 4])
    np.testing.assert_array_equal(pop.gy, [1, 0, 4])
    np.testing.assert_allclose(pop.xcoords, [0.0, 0.5, 1.0])


def test_mismatched_columns_rejected():
    with pytest.raises(ValueError):
        Population(
            gx=np.zeros(3, dtype=np.int32), gy=np.zeros(2, dtype=np.int32),
            is_moving=np.zeros(3, dtype=bool), state=np.ones(3, dtype=np.int8),
            time_sick=np.zeros(3, dtype=np.int32), res=10,
        )


def test_counts():
    pop = make_pop([(0, 0)] * 4, [I, U, U, HealthState.RECOVERED], res=10)
    assert pop.counts() == (1, 2, 1)


@pytest.mark.parametrize("cells,states,time_sick", [
    ([(11, 0)], [U], [0]),     # past x == 1
    ([(0, -1)], [U], [0]),     # below y == 0
    ([(0, 0)], [3], [0]),      # not a health state
    ([(0, 0)], [-1], [0]),
    ([(0, 0)], [I], [-2]),     # negative timer
])
def test_out_of_range_values_rejected(cells, states, time_sick):
    with pytest.raises(ValueError):
        make_pop(cells, states, res=10, time_sick=time_sick)


def test_far_edge_is_allowed():
    pop = make_pop([(10, 10)], [HealthState.RECOVERED], res=10, time_sick=[7])
    assert pop.counts() == (0, 0, 1)
