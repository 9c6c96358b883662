import jax
import numpy as np
import CoolProp.CoolProp as CP
import jaxmix as jxm


def rel_err(approx, ref):
    return (approx - ref) / ref if ref != 0 else np.nan


# Build a one-component model from the CoolProp fluid library
fluid_name = "CarbonDioxide"
T, rho = 350.0, 8000.0  # K, mol/m3
model = jxm.build_multifluid_model_from_json([fluid_name], [jxm.load_coolprop_fluid(fluid_name)], [], [])
x = np.array([1.0])

state = CP.AbstractState("HEOS", fluid_name)
state.update(CP.DmolarT_INPUTS, rho, T)
red = model.get_reducing_state(T, rho, x, identifier=fluid_name)
print(red)

# header
print(f"{'Property':<25} {'jax':>15} {'ref':>15} {'rel err':>15}")

# Residual Helmholtz energy
f1 = float(model.alphar(T, rho, x))
f2 = state.alphar()
print(f"{'alphar':<25} {f1:15.6e} {f2:15.6e} {rel_err(f1, f2):15.6e}")

# delta * d(alphar)/d(delta) = rho * d(alphar)/d(rho)
f1 = rho * float(jax.grad(model.alphar, argnums=1)(T, rho, x))
f2 = float(red.delta) * state.dalphar_dDelta()
print(f"{'delta*dalphar_ddelta':<25} {f1:15.6e} {f2:15.6e} {rel_err(f1, f2):15.6e}")

# tau * d(alphar)/d(tau) = -T * d(alphar)/dT
f1 = -T * float(jax.grad(model.alphar, argnums=0)(T, rho, x))
f2 = float(red.tau) * state.dalphar_dTau()
print(f"{'tau*dalphar_dtau':<25} {f1:15.6e} {f2:15.6e} {rel_err(f1, f2):15.6e}")

# Compressibility factor Z = 1 + delta * d(alphar)/d(delta)
f1 = 1 + rho * float(jax.grad(model.alphar, argnums=1)(T, rho, x))
f2 = state.compressibility_factor()
print(f"{'Z':<25} {f1:15.6e} {f2:15.6e} {rel_err(f1, f2):15.6e}")

# Complex-step derivative with the same model code
h = 1e-20
f1 = np.imag(model.alphar(T, rho + 1j * h, x)) / h * rho
f2 = float(red.delta) * state.dalphar_dDelta()
print(f"{'complex step':<25} {f1:15.6e} {f2:15.6e} {rel_err(f1, f2):15.6e}")
