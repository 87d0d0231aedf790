"""The embeddable widget script (GET /widget/feedr.js?wall=<slug>).

The script is rendered per request with the wall slug and the public
base URL baked in as JSON literals.  On load it finds
``[data-feedr-wall="<slug>"]`` in the host page, fetches the items API and
builds the grid with plain DOM calls: no iframe, so the host page's CSS
can style the cards.
"""

from __future__ import annotations

import json
from string import Template
from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import Response

from feedr.core.config import SETTINGS

router = APIRouter(tags=["widget"])

_WIDGET_JS = Template("""\
(function(){
  var slug=$slug;
  var host=$host;

  function el(tag, props){
    var n=document.createElement(tag);
    props = props || {};
    Object.keys(props).forEach(function(k){
      if(k === 'style') Object.assign(n.style, props[k]);
      else if(k === 'html') n.innerHTML = props[k];
      else n.setAttribute(k, props[k]);
    });
    return n;
  }

  function fallbackLink(url){
    var a=el('a', {href: url, target: '_blank', rel: 'noopener'});
    a.textContent='Open';
    return a;
  }

  function render(container, data){
    container.innerHTML='';
    var wrap=el('div', {'class': 'feedr-grid', style: {
      display: 'grid',
      gridTemplateColumns: 'repeat(3, minmax(0, 1fr))',
      gap: '12px',
      fontFamily: 'system-ui,-apple-system,Segoe UI,Roboto,Arial'
    }});

    if (window.matchMedia && window.matchMedia('(max-width: 980px)').matches) {
      wrap.style.gridTemplateColumns='1fr';
    }

    (data.items||[]).forEach(function(it){
      var card=el('div', {'class': 'feedr-card', style: {
        border: '1px solid rgba(15,23,42,0.10)',
        borderRadius: '16px',
        padding: '10px',
        background: '#fff',
        color: '#0b1220',
        overflow: 'hidden'
      }});
      if (it.html) card.innerHTML=it.html;
      else card.appendChild(fallbackLink(it.url));
      wrap.appendChild(card);
    });

    container.appendChild(wrap);
  }

  function boot(){
    var container=document.querySelector('[data-feedr-wall="'+CSS.escape(slug)+'"]');
    if(!container) return;
    fetch(host+'/api/walls/'+encodeURIComponent(slug)+'/items')
      .then(function(r){ if(!r.ok) throw new Error(r.status); return r.json(); })
      .then(function(data){ render(container, data); })
      .catch(function(){ container.textContent='feedr: kon items niet laden.'; });
  }

  if (document.readyState === 'loading') document.addEventListener('DOMContentLoaded', boot);
  else boot();
})();
""")


def _js_literal(value: str) -> str:
    # json.dumps does not escape "</", which would end an inline <script>
    return json.dumps(value).replace("</", "<\\/")


def render_widget(slug: str, host: str) -> str:
    return _WIDGET_JS.substitute(slug=_js_literal(slug), host=_js_literal(host))


@router.get("/widget/feedr.js")
def widget_script(wall: Annotated[str, Query()] = "") -> Response:
    return Response(
        content=render_widget(wall, SETTINGS.app_base_url),
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=300"},
    )
