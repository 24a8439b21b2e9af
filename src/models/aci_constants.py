"""ACI 318-19 coefficients and constants (US customary / psi units)."""

# Concrete type factor
LAMBDA_NWC = 1.0  # Normal weight concrete

# Shear (ACI 318-19 Section 22.5)
VC_COEFF = 2.0              # Simplified Vc: 2 * lambda * sqrt(fc) * bw * d
VS_MAX_COEFF = 8.0          # Max Vs: 8 * sqrt(fc) * bw * d
VS_HALF_COEFF = 4.0         # Spacing transition threshold: 4 * sqrt(fc) * bw * d
AV_MIN_COEFF_1 = 0.75       # Av,min: 0.75 * sqrt(fc) * bw * s / fy
AV_MIN_COEFF_2 = 50.0       # Av,min: 50 * bw * s / fy

# Flexure (ACI 318-19 Section 22.2)
PHI_TENSION = 0.9            # Tension-controlled phi
PHI_COMPRESSION = 0.65       # Compression-controlled phi
EPSILON_T_TENSION = 0.005    # Tension-controlled strain limit
EPSILON_T_COMPRESSION = 0.002  # Compression-controlled strain limit
EPSILON_T_LOW_DUCTILITY = 0.004  # Minimum net tensile strain for beams (9.3.3.1)
EPSILON_CU = 0.003           # Ultimate concrete strain
WHITNEY_COEFF = 0.85         # Whitney stress block factor
MIN_RHO_COEFF_1 = 3.0        # 3 * sqrt(fc) / fy
MIN_RHO_COEFF_2 = 200.0      # 200 / fy
RHO_MAX_FACTOR = 0.75        # rho_max = 0.75 * rho_b

# Phi factors
PHI_SHEAR = 0.75

# Spacing limits (in)
S_MAX_NORMAL = 24.0          # d/2 or 24 in
S_MAX_HEAVY = 12.0           # d/4 or 12 in
S_MIN_PRACTICAL = 3.0        # Practical floor for stirrup spacing

# Beta1 thresholds (psi)
BETA1_HIGH = 0.85
BETA1_LOW = 0.65
BETA1_STEP = 0.05            # beta1 reduction per 1000 psi above FC_BETA1_UPPER
FC_BETA1_UPPER = 4000.0      # fc threshold for beta1 = 0.85
FC_BETA1_LOWER = 8000.0      # fc threshold for beta1 = 0.65

# Steel
ES_STEEL = 29_000_000.0      # psi
NOMINAL_BAR_DIAMETER = 1.0   # in, used for d when no tension layer exists
