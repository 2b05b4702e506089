import numpy as np
import pytest

from svdpca import Arrayset, LinearMachine, SVDPCATrainer, svd_pca
from svdpca.errors import FactorizationFailure, InsufficientSamples, ShapeMismatch, TypeMismatch


def make_correlated(n=200, d=5, seed=0):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n, d))
    A = rng.normal(size=(d, d))
    X = X @ np.linalg.cholesky(A @ A.T) + rng.normal(size=(d,))
    return X


def test_three_point_example():
    samples = Arrayset.from_array(np.array([[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0]]))
    machine = LinearMachine()
    eig = SVDPCATrainer().train(machine, samples)

    assert np.allclose(machine.input_subtraction, [0.0, 1.0 / 3.0])

    Xc = np.array([[1.0, 0.0, -1.0], [0.0, 1.0, 0.0]]) - np.array([[0.0], [1.0 / 3.0]])
    U, S, _ = np.linalg.svd(Xc, full_matrices=False)
    assert np.allclose(eig, S**2 / 2)
    assert np.allclose(eig, [1.0, 1.0 / 3.0])
    # leading direction along the x axis (sign is arbitrary)
    assert np.allclose(np.abs(machine.weights[0]), [1.0, 0.0], atol=1e-12)
    assert np.allclose(np.abs(machine.weights), np.abs(U.T))


def test_eigenvalues_sorted_and_nonnegative():
    eig = svd_pca(Arrayset.from_array(make_correlated())).eigenvalues
    assert np.all(eig >= 0)
    assert np.all(np.diff(eig) <= 0)


def test_eigenvalues_match_covariance_spectrum():
    X = make_correlated(n=300, d=4, seed=3)
    eig = svd_pca(Arrayset.from_array(X)).eigenvalues
    ref = np.sort(np.linalg.eigvalsh(np.cov(X.T)))[::-1]
    assert np.allclose(eig, ref)


def test_weight_rows_orthonormal():
    res = svd_pca(Arrayset.from_array(make_correlated(n=150, d=6, seed=1)))
    W = res.machine.weights
    assert np.allclose(W @ W.T, np.eye(W.shape[0]), atol=1e-10)


@pytest.mark.parametrize("n,d", [(50, 6), (4, 10), (6, 6)])
def test_shape_contract(n, d):
    X = np.random.default_rng(n).normal(size=(n, d))
    machine = LinearMachine()
    eig = SVDPCATrainer().train(machine, Arrayset.from_array(X))
    assert machine.input_dim == d
    assert machine.output_dim == min(n, d)
    assert eig.shape == (machine.output_dim,)
    assert np.allclose(machine.biases, 0.0)
    W = machine.weights
    assert np.allclose(W @ W.T, np.eye(min(n, d)), atol=1e-10)


def test_normalized_equals_manual_division():
    X = make_correlated(n=120, d=4, seed=2)
    samples = Arrayset.from_array(X)
    plain, norm = LinearMachine(), LinearMachine()
    eig = SVDPCATrainer(normalize_by_variance=False).train(plain, samples)
    eig_n = SVDPCATrainer(normalize_by_variance=True).train(norm, samples)

    assert np.allclose(eig, eig_n)
    assert np.allclose(plain.division, 1.0)
    assert np.allclose(norm.division, np.sqrt(eig))
    Z = plain.forward(X) / np.sqrt(eig)
    assert np.allclose(Z, norm.forward(X))
    # z-scored components have unit sample variance
    assert np.allclose(norm.forward(X).var(axis=0, ddof=1), 1.0)


def test_repeated_fits_identical():
    samples = Arrayset.from_array(make_correlated(seed=4))
    trainer = SVDPCATrainer()
    m1, m2 = LinearMachine(), LinearMachine()
    e1 = trainer.fit(m1, samples)
    e2 = trainer.fit(m2, samples)
    assert np.array_equal(e1, e2)
    assert np.array_equal(m1.weights, m2.weights)
    assert np.array_equal(m1.input_subtraction, m2.input_subtraction)


def test_projection_reconstructs_centered_data():
    X = make_correlated(n=40, d=3, seed=5)
    machine = svd_pca(Arrayset.from_array(X)).machine
    Z = machine.forward(X)
    Xr = Z @ machine.weights + machine.input_subtraction
    assert np.allclose(Xr, X)


def test_train_machine_discards_eigenvalues():
    samples = Arrayset.from_array(make_correlated(n=30, d=3))
    m = SVDPCATrainer().train_machine(LinearMachine(), samples)
    assert isinstance(m, LinearMachine)
    assert m.shape == (3, 3)


def test_trainer_is_value_object():
    a = SVDPCATrainer(normalize_by_variance=True)
    assert a == SVDPCATrainer(True)
    assert a != SVDPCATrainer()
    with pytest.raises(AttributeError):
        a.normalize_by_variance = False  # frozen


def test_integer_samples_rejected():
    samples = Arrayset.from_array(np.array([[1, 2, 3]], dtype=np.int64))
    machine = LinearMachine(2, 2)
    with pytest.raises(TypeMismatch, match="found integer, expected 64-bit float"):
        SVDPCATrainer().train(machine, samples)
    # nothing touched
    assert machine.shape == (2, 2)


def test_rank_two_samples_rejected():
    samples = Arrayset.from_array(np.zeros((3, 2, 2)))
    with pytest.raises(ShapeMismatch, match="found rank 2, expected rank 1") as exc:
        SVDPCATrainer().train(LinearMachine(), samples)
    assert exc.value.found == 2 and exc.value.expected == 1


@pytest.mark.parametrize("n", [0, 1])
def test_too_few_samples(n):
    samples = Arrayset.from_array(np.ones((n, 3)))
    with pytest.raises(InsufficientSamples):
        SVDPCATrainer().train(LinearMachine(), samples)


def test_svd_failure_propagates(monkeypatch):
    def boom(*args, **kwargs):
        raise np.linalg.LinAlgError("SVD did not converge")

    monkeypatch.setattr(np.linalg, "svd", boom)
    with pytest.raises(FactorizationFailure) as exc:
        svd_pca(Arrayset.from_array(make_correlated(n=10, d=3)))
    assert isinstance(exc.value.__cause__, np.linalg.LinAlgError)


def test_explained_variance_ratio_sums_to_one():
    res = svd_pca(Arrayset.from_array(make_correlated()))
    assert abs(float(res.explained_variance_ratio.sum()) - 1.0) < 1e-9


def test_big_endian_samples_accepted():
    X = make_correlated(n=5, d=3, seed=6)
    native = svd_pca(Arrayset.from_array(X))
    swapped = svd_pca(Arrayset.from_array(X.astype(">f8")))
    assert np.allclose(swapped.eigenvalues, native.eigenvalues)
    assert swapped.machine.is_similar_to(native.machine)


def test_float32_samples_rejected():
    samples = Arrayset.from_array(np.ones((4, 3), dtype=np.float32))
    with pytest.raises(TypeMismatch, match="found 32-bit float, expected 64-bit float"):
        SVDPCATrainer().train(LinearMachine(), samples)


def test_empty_typed_store_reports_sample_count():
    with pytest.raises(InsufficientSamples, match="found 0 sample"):
        SVDPCATrainer().train(LinearMachine(), Arrayset(element_type=np.float64))
