"""
Printful Proxy - Print on Demand Browsing Page
==============================================

What:  Serves GET /pod, a single HTML page for browsing the Printful catalog,
       picking a variant and estimating costs.
How:   Static HTML + a small script that talks to /api/printful:
       - GET  ?action=catalog          → product grid
       - GET  ?action=product&id=...   → variant picker
       - POST ?action=estimate         → cost breakdown for a destination
Who:   Opened directly in the browser.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["Pages"])

PAGE_TITLE = "Print on Demand"
PAGE_DESCRIPTION = "Create custom merchandise with Printful integration"

POD_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="description" content="__DESCRIPTION__">
  <title>__TITLE__</title>
  <style>
    body { margin: 0; font-family: system-ui, sans-serif; background: #f9fafb; color: #111827; }
    main { max-width: 72rem; margin: 0 auto; padding: 2rem 1rem; }
    h1 { font-size: 1.875rem; margin: 0; }
    header p { color: #4b5563; margin-top: .5rem; }
    .panel { background: #fff; border-radius: .75rem; box-shadow: 0 1px 2px rgba(0,0,0,.06); padding: 1.5rem; }
    .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(12rem, 1fr)); gap: 1rem; }
    .card { border: 1px solid #e5e7eb; border-radius: .5rem; padding: .75rem; cursor: pointer; }
    .card.selected { border-color: #2563eb; }
    .card img { width: 100%; aspect-ratio: 1; object-fit: contain; }
    .error { color: #b91c1c; }
    footer { margin-top: 2rem; text-align: center; font-size: .875rem; color: #6b7280; }
    form { display: flex; flex-wrap: wrap; gap: .5rem; margin-top: 1rem; }
  </style>
</head>
<body>
  <main>
    <header style="margin-bottom: 2rem">
      <h1>__TITLE__</h1>
      <p>Browse products, select variants, and calculate costs for your custom merchandise.</p>
    </header>

    <div class="panel">
      <div id="status">Loading catalog...</div>
      <div id="catalog" class="grid"></div>
      <section id="detail" hidden>
        <h2 id="detail-title"></h2>
        <label>Variant <select id="variant"></select></label>
        <form id="estimate-form">
          <input name="country_code" placeholder="Country (US)" value="US" required>
          <input name="state_code" placeholder="State (CA)">
          <input name="zip" placeholder="ZIP" required>
          <input name="quantity" type="number" min="1" value="1" required>
          <button type="submit">Estimate costs</button>
        </form>
        <pre id="estimate"></pre>
      </section>
    </div>

    <footer>Powered by Printful</footer>
  </main>

  <script>
    const API = "/api/printful";
    const statusEl = document.getElementById("status");

    async function call(query, options) {
      const response = await fetch(API + query, options);
      const payload = await response.json();
      if (!response.ok) throw new Error(payload.error || response.statusText);
      return payload;
    }

    function showError(err) {
      statusEl.textContent = err.message;
      statusEl.className = "error";
    }

    async function loadCatalog() {
      const { products } = await call("?action=catalog");
      const grid = document.getElementById("catalog");
      grid.replaceChildren(...products.map((product) => {
        const card = document.createElement("div");
        card.className = "card";
        const img = document.createElement("img");
        img.src = product.image;
        img.alt = product.title || product.model || "";
        const title = document.createElement("div");
        title.textContent = product.title || product.model;
        card.append(img, title);
        card.onclick = () => {
          grid.querySelectorAll(".card").forEach((c) => c.classList.remove("selected"));
          card.classList.add("selected");
          loadProduct(product.id).catch(showError);
        };
        return card;
      }));
      statusEl.textContent = products.length + " products";
    }

    async function loadProduct(id) {
      const { product } = await call("?action=product&id=" + encodeURIComponent(id));
      document.getElementById("detail").hidden = false;
      document.getElementById("detail-title").textContent = product.product.title;
      const select = document.getElementById("variant");
      select.replaceChildren(...product.variants.map((variant) => {
        const option = document.createElement("option");
        option.value = variant.id;
        option.textContent = variant.name + " ($" + variant.price + ")";
        return option;
      }));
    }

    document.getElementById("estimate-form").onsubmit = async (event) => {
      event.preventDefault();
      const form = new FormData(event.target);
      const body = {
        recipient: {
          country_code: form.get("country_code"),
          state_code: form.get("state_code") || undefined,
          zip: form.get("zip"),
        },
        items: [{
          variant_id: Number(document.getElementById("variant").value),
          quantity: Number(form.get("quantity")),
        }],
      };
      try {
        const { costs } = await call("?action=estimate", {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body),
        });
        document.getElementById("estimate").textContent = JSON.stringify(costs, null, 2);
      } catch (err) {
        showError(err);
      }
    };

    loadCatalog().catch(showError);
  </script>
</body>
</html>
"""


@router.get(
    "/pod",
    response_class=HTMLResponse,
    summary="Print on Demand browsing page",
    include_in_schema=False,
)
async def pod_page() -> HTMLResponse:
    html = POD_PAGE.replace("__TITLE__", PAGE_TITLE).replace("__DESCRIPTION__", PAGE_DESCRIPTION)
    return HTMLResponse(content=html)
