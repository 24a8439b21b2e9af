import matplotlib.patches as patches
import matplotlib.pyplot as plt


def draw_beam_section_flexure(section, result=None):
    """Draw the cross section with every bar at its depth; the neutral axis when a result is given."""
    b, h = section.b, section.h
    fig, ax = plt.subplots(figsize=(4, 4))
    rect = patches.Rectangle((0, 0), b, h, linewidth=2, edgecolor='#333333', facecolor='#e0e0e0')
    ax.add_patch(rect)

    for layers, color in ((section.tension_layers, 'red'), (section.compression_layers, 'blue')):
        for layer in layers:
            y = h - layer.depth
            for x in _bar_positions(section, layer.bar.diameter, layer.quantity):
                ax.add_patch(patches.Circle((x, y), layer.bar.diameter / 2, color=color))
            ax.text(b + 0.5, y, layer.describe(), va='center', color=color, fontsize=7)

    if result is not None:
        y_na = h - result.c
        ax.plot([-1, b + 1], [y_na, y_na], 'k--', linewidth=1)
        ax.text(-1.5, y_na, f"c={result.c:.2f}", ha='right', va='center', fontsize=7)
        ax.add_patch(patches.Rectangle((0, h - result.a), b, result.a, facecolor='#ffcc80', alpha=0.5))

    ax.set_xlim(-6, b + 8)
    ax.set_ylim(-2, h + 2)
    ax.set_aspect('equal')
    ax.axis('off')
    return fig


def draw_strain_diagram(result):
    """Linear strain profile with the layer strains marked (tension positive)."""
    section = result.section
    h = section.h
    eps_bottom = section.eps_cu * (h - result.c) / result.c
    fig, ax = plt.subplots(figsize=(3, 4))
    ax.plot([-section.eps_cu, eps_bottom], [h, 0], color='#333333')
    ax.axvline(0, color='gray', linewidth=0.8)
    ax.axhline(h - result.c, color='k', linestyle='--', linewidth=0.8)
    for item in result.layers:
        color = 'red' if item.role == "tension" else 'blue'
        ax.plot(item.strain, h - item.depth, 'o', color=color)
        ax.text(item.strain, h - item.depth, f" {item.strain:.4f}", fontsize=7, va='center')
    ax.set_xlabel("Deformación")
    ax.set_ylabel("Altura [in]")
    ax.set_title(f"epsilon_t = {result.epsilon_t:.5f}", fontsize=9)
    fig.tight_layout()
    return fig


def draw_beam_section_shear(b, h, cover, s_req, n_legs):
    """Draw cross section with stirrup legs and side elevation with spacing."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(7, 4), gridspec_kw={'width_ratios': [1, 1.2]})

    # --- Cross section ---
    rect = patches.Rectangle((0, 0), b, h, linewidth=2, edgecolor='#333333', facecolor='#e0e0e0')
    ax1.add_patch(rect)

    # Stirrup outline (dashed green)
    stirrup = patches.Rectangle(
        (cover, cover), b - 2*cover, h - 2*cover,
        linewidth=2, edgecolor='#2e7d32', facecolor='none', linestyle='--'
    )
    ax1.add_patch(stirrup)

    # Internal legs if n_legs > 2
    if n_legs > 2:
        inner_width = b - 2 * cover
        for i in range(1, n_legs - 1):
            x = cover + inner_width * i / (n_legs - 1)
            ax1.plot([x, x], [cover, h - cover], color='#2e7d32', linewidth=1.5, linestyle='--')

    ax1.set_xlim(-2, b + 2)
    ax1.set_ylim(-2, h + 2)
    ax1.set_aspect('equal')
    ax1.set_title("Seccion", fontsize=9)
    ax1.axis('off')

    # --- Side elevation with stirrup spacing ---
    beam_length = max(h * 1.5, 16)
    ax2.add_patch(patches.Rectangle((0, 0), beam_length, h, linewidth=2,
                                     edgecolor='#333333', facecolor='#f5f5f5'))

    if s_req and s_req > 0:
        x = cover
        while x < beam_length - cover:
            ax2.plot([x, x], [cover, h - cover], color='#2e7d32', linewidth=1.2)
            x += s_req
        ax2.set_title(f"Elevacion (s = {s_req:.1f} in)", fontsize=9)
    else:
        ax2.set_title("Elevacion (sin estribos req.)", fontsize=9)

    ax2.set_xlim(-2, beam_length + 2)
    ax2.set_ylim(-2, h + 2)
    ax2.set_aspect('equal')
    ax2.axis('off')

    fig.tight_layout()
    return fig


def _bar_positions(section, diameter, quantity):
    """Evenly spaced bar centers between the side covers."""
    x_min = section.side_cover + diameter / 2
    x_max = section.b - section.side_cover - diameter / 2
    if quantity == 1:
        return [section.b / 2]
    step = (x_max - x_min) / (quantity - 1)
    return [x_min + i * step for i in range(quantity)]
