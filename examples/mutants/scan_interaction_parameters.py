import logging
import numpy as np
import jaxmix as jxm

logging.basicConfig(level=logging.DEBUG)

# Base model for a binary mixture without interaction data
components = ["Nitrogen", "Argon"]
fluids = [jxm.load_coolprop_fluid(name) for name in components]
model = jxm.build_multifluid_model_from_json(components, fluids, [], [], flags={"estimate": True})

T, rho = 300.0, 5000.0  # K, mol/m3
x = np.array([0.5, 0.5])

# Scan the temperature interaction parameter with a mutant of the base model
print(f"{'betaT':>10} {'gammaT':>10} {'Tr':>12} {'alphar':>15}")
for betaT in np.linspace(0.98, 1.02, 5):
    for gammaT in (0.99, 1.0, 1.01):
        overrides = {
            "0": {
                "1": {
                    "BIP": {"betaT": betaT, "gammaT": gammaT, "betaV": 1.0, "gammaV": 1.0, "Fij": 0.0},
                    "departure": {"type": "none"},
                }
            }
        }
        mutant = jxm.build_multifluid_mutant(model, overrides)
        state = mutant.get_reducing_state(T, rho, x)
        print(f"{betaT:10.4f} {gammaT:10.4f} {float(state.Tr):12.4f} {float(state.alphar):15.6e}")

# The invariant reducing function with the same parameters as the base model
overrides = {
    "0": {
        "1": {
            "BIP": {"phiT": 1.0, "lambdaT": 0.0, "phiV": 1.0, "lambdaV": 0.0, "Fij": 0.0},
            "departure": {"type": "none"},
        }
    }
}
invariant = jxm.build_multifluid_mutant_invariant(model, overrides)
print(f"Base model:      {float(model.alphar(T, rho, x)):.12e}")
print(f"Invariant model: {float(invariant.alphar(T, rho, x)):.12e}")
print(f"Metadata: {invariant.get_meta()}")
