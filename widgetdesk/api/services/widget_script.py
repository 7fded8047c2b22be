"""Loader JavaScript servido em /widget.js (público, cacheável)."""

_SCRIPT_TEMPLATE = r"""
(function() {
  'use strict';

  var scriptTag = document.currentScript;
  var widgetId = scriptTag && scriptTag.getAttribute('data-widget-id');
  if (!widgetId) {
    console.error('AI Chatbot: Widget ID not provided');
    return;
  }

  var API_BASE = '__API_BASE__';
  var sessionId = 'session_' + Date.now() + '_' + Math.random().toString(36).slice(2, 11);
  var widgetConfig = null;
  var isMinimized = true;

  function el(tag, style, text) {
    var node = document.createElement(tag);
    if (style) node.style.cssText = style;
    if (text) node.textContent = text;
    return node;
  }

  function addMessage(container, text, isBot) {
    var theme = widgetConfig.config.theme || {};
    var bubble = el('div',
      'padding:12px;border-radius:8px;max-width:85%;word-wrap:break-word;' +
      'align-self:' + (isBot ? 'flex-start' : 'flex-end') + ';' +
      'background:' + (isBot ? '#f8f9fa' : (theme.primaryColor || '#007bff')) + ';' +
      'color:' + (isBot ? '#333' : '#fff') + ';', text);
    container.appendChild(bubble);
    container.scrollTop = container.scrollHeight;
  }

  function render() {
    var theme = widgetConfig.config.theme || {};
    var behavior = widgetConfig.config.behavior || {};
    var color = theme.primaryColor || '#007bff';

    var root = el('div', 'position:fixed;bottom:20px;right:20px;z-index:10000;font-family:' +
      (theme.fontFamily || 'Inter, sans-serif') + ';');
    var toggle = el('button', 'width:60px;height:60px;border-radius:50%;border:none;cursor:pointer;' +
      'color:#fff;background:' + color + ';box-shadow:0 4px 12px rgba(0,0,0,0.15);', '\u{1F4AC}');
    var panel = el('div', 'position:absolute;bottom:80px;right:0;width:350px;height:500px;background:#fff;' +
      'border-radius:' + (theme.borderRadius || '8px') + ';box-shadow:0 8px 32px rgba(0,0,0,0.1);' +
      'display:none;flex-direction:column;overflow:hidden;');
    var header = el('div', 'padding:16px;color:#fff;font-weight:600;background:' + color + ';',
      widgetConfig.name || 'AI Assistant');
    var messages = el('div', 'flex:1;overflow-y:auto;padding:16px;display:flex;flex-direction:column;gap:12px;');
    var form = el('form', 'padding:16px;border-top:1px solid #e9ecef;display:flex;gap:8px;');
    var input = el('input', 'flex:1;border:1px solid #dee2e6;border-radius:4px;padding:8px 12px;');
    input.placeholder = behavior.placeholder || 'Type your message...';
    var send = el('button', 'border:none;border-radius:4px;padding:8px 16px;color:#fff;background:' + color + ';', 'Send');

    form.appendChild(input);
    form.appendChild(send);
    panel.appendChild(header);
    panel.appendChild(messages);
    panel.appendChild(form);
    root.appendChild(toggle);
    root.appendChild(panel);
    document.body.appendChild(root);

    addMessage(messages, behavior.greeting || 'Hello! How can I help you today?', true);

    toggle.onclick = function() {
      isMinimized = !isMinimized;
      panel.style.display = isMinimized ? 'none' : 'flex';
    };

    form.onsubmit = function(event) {
      event.preventDefault();
      var text = input.value.trim();
      if (!text) return;
      addMessage(messages, text, false);
      input.value = '';
      fetch(widgetConfig.apiEndpoint, {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ message: text, sessionId: sessionId })
      })
        .then(function(r) { return r.json(); })
        .then(function(data) { if (data.response) addMessage(messages, data.response, true); })
        .catch(function() { addMessage(messages, 'Sorry, I encountered an error. Please try again.', true); });
    };
  }

  fetch(API_BASE + '/widget/' + widgetId + '/config')
    .then(function(r) {
      if (!r.ok) throw new Error('Failed to load widget config');
      return r.json();
    })
    .then(function(cfg) { widgetConfig = cfg; render(); })
    .catch(function(err) { console.error('AI Chatbot: Failed to load configuration', err); });
})();
"""


def render_widget_script(api_base: str) -> str:
    return _SCRIPT_TEMPLATE.replace("__API_BASE__", api_base.rstrip("/"))
