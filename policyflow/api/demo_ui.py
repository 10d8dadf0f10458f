from __future__ import annotations


def render_demo_ui_html() -> str:
    return """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>PolicyFlow</title>
  <style>
    :root {
      --bg: #f8fafc;
      --paper: #ffffff;
      --ink: #0f172a;
      --muted: #64748b;
      --line: #e2e8f0;
      --accent: #2563eb;
      --accent-ink: #1e40af;
      --good: #16a34a;
      --warn: #d97706;
      --bad: #dc2626;
      --shadow: 0 8px 24px rgba(15, 23, 42, 0.06);
      --radius: 12px;
      --mono: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, "Liberation Mono", monospace;
      --sans: "Inter", "Segoe UI", system-ui, sans-serif;
    }
    * { box-sizing: border-box; }
    body { margin: 0; font-family: var(--sans); color: var(--ink); background: var(--bg); }
    .shell { display: flex; min-height: 100vh; }
    .sidebar { width: 240px; background: var(--paper); border-right: 1px solid var(--line); transition: width .2s ease; }
    .sidebar.collapsed { width: 72px; }
    .sidebar.collapsed .label, .sidebar.collapsed .brand { display: none; }
    .sidebar-head { height: 60px; display: flex; align-items: center; justify-content: space-between; padding: 0 14px; border-bottom: 1px solid var(--line); }
    .brand { font-weight: 700; }
    .nav { display: grid; gap: 6px; padding: 14px; }
    .main { flex: 1; display: flex; flex-direction: column; min-width: 0; }
    header { height: 60px; display: flex; align-items: center; padding: 0 28px; border-bottom: 1px solid var(--line); background: var(--paper); }
    header h1 { margin: 0; font-size: 1.15rem; }
    main { padding: 28px; overflow: auto; }
    .card { background: var(--paper); border: 1px solid var(--line); border-radius: var(--radius); box-shadow: var(--shadow); }
    .card h2 { margin: 0; padding: 14px 16px; font-size: 1rem; border-bottom: 1px solid var(--line); }
    .card .body { padding: 14px 16px; }
    .hero { background: linear-gradient(90deg, #2563eb, #1d4ed8); color: #fff; border-radius: 16px; padding: 28px; display: flex; justify-content: space-between; align-items: center; gap: 16px; }
    .hero h2 { margin: 0 0 6px; font-size: 1.6rem; }
    .hero p { margin: 0; color: #dbeafe; }
    .grid2 { display: grid; gap: 16px; grid-template-columns: repeat(2, minmax(0, 1fr)); }
    .grid3 { display: grid; gap: 16px; grid-template-columns: repeat(3, minmax(0, 1fr)); }
    .split { display: grid; gap: 20px; grid-template-columns: 2fr 1fr; }
    .stack { display: grid; gap: 16px; }
    .kpi .value { font-size: 1.8rem; font-weight: 700; }
    .kpi .value.accent { color: var(--accent); }
    .kpi .value.good { color: var(--good); }
    .kpi .value.warn { color: var(--warn); }
    .kpi .label { color: var(--muted); font-size: .85rem; margin-top: 6px; }
    .field-label { color: var(--muted); font-size: .7rem; font-weight: 600; letter-spacing: .05em; text-transform: uppercase; }
    .field-value { font-size: .9rem; margin-top: 4px; }
    button {
      font: inherit; cursor: pointer; border-radius: 10px; border: 1px solid var(--line);
      background: #fff; color: var(--ink); padding: 9px 12px; text-align: left;
    }
    button.primary { background: var(--accent); color: #fff; border-color: var(--accent); text-align: center; }
    button.success { background: var(--good); color: #fff; border-color: var(--good); text-align: center; }
    button.ghost { background: transparent; border-color: transparent; }
    button.active { background: var(--accent); color: #fff; }
    button.hero-btn { background: #fff; color: var(--accent); font-size: 1.05rem; padding: 14px 24px; }
    button:disabled { opacity: .5; cursor: not-allowed; }
    button.block { width: 100%; }
    textarea { width: 100%; font: inherit; border: 1px solid var(--line); border-radius: 10px; padding: 10px; resize: none; }
    textarea.doc { min-height: 420px; font-family: var(--mono); font-size: .85rem; }
    pre.doc { margin: 0; white-space: pre-wrap; font-size: .85rem; background: #f1f5f9; border-radius: 10px; padding: 14px; }
    .badge { display: inline-block; border-radius: 999px; padding: 3px 10px; font-size: .75rem; border: 1px solid var(--line); background: #f1f5f9; }
    .badge.reviewing { background: #dbeafe; color: #1e40af; }
    .badge.drafting { background: #fef9c3; color: #854d0e; }
    .badge.risk-low { background: #f0fdf4; color: #15803d; border-color: #86efac; }
    .badge.risk-medium { background: #fefce8; color: #a16207; border-color: #fde047; }
    .badge.risk-high { background: #fef2f2; color: #b91c1c; border-color: #fca5a5; }
    .progress { height: 8px; border-radius: 999px; background: var(--line); overflow: hidden; }
    .progress > div { height: 100%; background: var(--accent); transition: width .3s ease; }
    .chat { display: flex; flex-direction: column; height: 600px; }
    .messages { flex: 1; overflow-y: auto; padding: 16px; display: grid; gap: 12px; align-content: start; }
    .msg { max-width: 70%; padding: 10px 14px; border-radius: 12px; font-size: .9rem; }
    .msg.user { justify-self: end; background: var(--accent); color: #fff; border-bottom-right-radius: 2px; }
    .msg.agent { justify-self: start; background: #f1f5f9; border-bottom-left-radius: 2px; }
    .msg .ts { font-size: .7rem; margin-top: 4px; opacity: .75; }
    .composer { border-top: 1px solid var(--line); padding: 14px 16px; display: grid; gap: 10px; }
    .composer-row { display: grid; grid-template-columns: 1fr auto; gap: 8px; }
    .banner { border-radius: 10px; padding: 10px 14px; font-size: .9rem; }
    .banner.error { background: #fef2f2; color: #b91c1c; border: 1px solid #fecaca; }
    .banner.success { background: #f0fdf4; color: #166534; border: 1px solid #bbf7d0; }
    .banner.info { background: #eff6ff; color: #1e40af; border: 1px solid #bfdbfe; }
    .compliance-item { padding: 10px 0; border-bottom: 1px solid var(--line); }
    .compliance-item:last-child { border-bottom: 0; }
    .final-doc { border: 2px solid var(--line); border-radius: 12px; padding: 28px; }
    .final-doc h3 { text-align: center; margin: 0; font-size: 1.4rem; }
    .center { text-align: center; }
    .muted { color: var(--muted); font-size: .85rem; }
    .hidden { display: none !important; }
    @media (max-width: 1080px) {
      .split, .grid3, .grid2 { grid-template-columns: 1fr; }
    }
  </style>
</head>
<body>
  <div class="shell">
    <aside id="sidebar" class="sidebar">
      <div class="sidebar-head">
        <span class="brand">HR Policies</span>
        <button id="sidebarToggle" class="ghost" title="Toggle sidebar">&#9776;</button>
      </div>
      <nav class="nav" id="nav">
        <button data-screen="dashboard">&#9638; <span class="label">Dashboard</span></button>
        <button data-screen="policies">&#128196; <span class="label">Active Policies</span></button>
        <button data-screen="library">&#128214; <span class="label">Policy Library</span></button>
        <button data-screen="settings">&#9881; <span class="label">Settings</span></button>
      </nav>
    </aside>

    <div class="main">
      <header><h1 id="headerTitle">Dashboard</h1></header>
      <main>
        <div id="globalError" class="banner error hidden"></div>

        <section id="screen-dashboard" class="stack hidden">
          <div class="hero">
            <div>
              <h2>Create New HR Policy</h2>
              <p>Have a conversation, ensure compliance, generate draft in minutes</p>
            </div>
            <button id="startPolicyBtn" class="hero-btn">Start New Policy &#8250;</button>
          </div>
          <div class="grid3" id="statsGrid"></div>
          <div>
            <h3>Active Policies</h3>
            <div class="grid2" id="dashboardPolicies"></div>
          </div>
        </section>

        <section id="screen-policies" class="stack hidden">
          <div class="grid2" id="policiesList"></div>
        </section>

        <section id="screen-library" class="stack hidden">
          <div class="grid3" id="policyTypes"></div>
          <div><button id="libraryStartBtn" class="primary">Start New Policy</button></div>
        </section>

        <section id="screen-settings" class="stack hidden">
          <div class="card"><h2>Service</h2><div class="body"><pre class="doc" id="healthJson">{}</pre></div></div>
        </section>

        <section id="screen-interview" class="split hidden">
          <div class="card chat">
            <div class="body" style="border-bottom:1px solid var(--line);">
              <div style="display:flex;justify-content:space-between;margin-bottom:8px;">
                <strong id="progressLabel">0% Complete</strong>
                <span class="muted" id="questionsLabel"></span>
              </div>
              <div class="progress"><div id="progressBar" style="width:0%"></div></div>
            </div>
            <div class="messages" id="messages"></div>
            <div class="composer">
              <div id="interviewError" class="banner error hidden"></div>
              <div class="composer-row">
                <textarea id="messageInput" rows="3" placeholder="Type your response..."></textarea>
                <button id="sendBtn" class="primary">Send</button>
              </div>
              <button id="generateDraftBtn" class="success block hidden">Generate Draft</button>
            </div>
          </div>
          <div class="card">
            <h2>Gathered Information</h2>
            <div class="body stack" id="gatheredInfo"></div>
          </div>
        </section>

        <section id="screen-draft-review" class="stack hidden">
          <div style="display:flex;justify-content:space-between;align-items:flex-start;">
            <div>
              <h2 id="draftTitle" style="margin:0;"></h2>
              <p class="muted" id="draftType"></p>
            </div>
            <span class="badge reviewing" id="draftStatusBadge"></span>
          </div>
          <div id="draftBanner" class="banner hidden"></div>
          <div class="card"><div class="body grid3" id="draftMeta"></div></div>
          <div class="split">
            <div class="card">
              <h2 style="display:flex;justify-content:space-between;align-items:center;">
                Policy Draft <button id="editToggleBtn">Edit</button>
              </h2>
              <div class="body">
                <textarea id="draftEditor" class="doc hidden"></textarea>
                <pre id="draftViewer" class="doc"></pre>
              </div>
            </div>
            <div class="stack">
              <div class="card">
                <h2>Compliance Validation</h2>
                <div class="body" id="complianceList"></div>
              </div>
              <button id="approveBtn" class="success block">Approve &amp; Generate Final Policy</button>
              <button id="backToInterviewBtn" class="block">Back to Interview</button>
            </div>
          </div>
        </section>

        <section id="screen-final-policy" class="stack hidden">
          <div id="finalBanner" class="banner success">
            <strong>Policy Generated Successfully</strong><br />
            Your policy has been finalized. Review the compliance summary before distribution.
          </div>
          <div class="split">
            <div class="card">
              <h2>Final Policy Document</h2>
              <div class="body">
                <div class="final-doc stack">
                  <div class="center" style="border-bottom:1px solid var(--line);padding-bottom:16px;">
                    <h3 id="finalTitle"></h3>
                    <p class="muted" id="finalEffective"></p>
                    <p class="muted" id="finalComplianceLine"></p>
                  </div>
                  <pre class="doc" id="finalContent" style="background:transparent;"></pre>
                  <div class="center muted" style="border-top:1px solid var(--line);padding-top:16px;">
                    <div id="finalDocId"></div>
                    <div id="finalVersion"></div>
                  </div>
                </div>
              </div>
            </div>
            <div class="stack">
              <div class="card"><h2>Policy Details</h2><div class="body stack" id="finalDetails"></div></div>
              <div class="card">
                <h2>Download Options</h2>
                <div class="body stack">
                  <button data-export="docx" class="block">&#11015; Download as DOCX</button>
                  <button data-export="xlsx" class="block">&#11015; Compliance Matrix (XLSX)</button>
                  <button data-export="both" class="block">&#11015; Download Bundle (ZIP)</button>
                </div>
              </div>
              <div class="card">
                <h2>Next Steps</h2>
                <div class="body muted">&#10003; Share with team<br />&#10003; Add to employee handbook<br />&#10003; Schedule review reminder</div>
              </div>
              <button id="backToDashboardBtn" class="primary block">Back to Dashboard</button>
            </div>
          </div>
        </section>
      </main>
    </div>
  </div>

  <script>
    (() => {
      const SESSION_KEY = "policyflow_session_id";
      const SCREENS = ["dashboard", "interview", "draft-review", "final-policy", "policies", "library", "settings"];
      const GATHERED_LABELS = {
        policy_type: "Policy Type",
        departments: "Departments",
        employee_levels: "Employee Levels",
        jurisdiction: "Jurisdiction",
        effective_date: "Effective Date",
        specific_requirements: "Specific Requirements",
        work_hours: "Work Hours",
        equipment: "Equipment",
        other_details: "Other Details",
      };
      const $ = (id) => document.getElementById(id);
      const els = {
        sidebar: $("sidebar"),
        sidebarToggle: $("sidebarToggle"),
        nav: $("nav"),
        headerTitle: $("headerTitle"),
        globalError: $("globalError"),
        startPolicyBtn: $("startPolicyBtn"),
        libraryStartBtn: $("libraryStartBtn"),
        statsGrid: $("statsGrid"),
        dashboardPolicies: $("dashboardPolicies"),
        policiesList: $("policiesList"),
        policyTypes: $("policyTypes"),
        healthJson: $("healthJson"),
        progressLabel: $("progressLabel"),
        questionsLabel: $("questionsLabel"),
        progressBar: $("progressBar"),
        messages: $("messages"),
        interviewError: $("interviewError"),
        messageInput: $("messageInput"),
        sendBtn: $("sendBtn"),
        generateDraftBtn: $("generateDraftBtn"),
        gatheredInfo: $("gatheredInfo"),
        draftTitle: $("draftTitle"),
        draftType: $("draftType"),
        draftStatusBadge: $("draftStatusBadge"),
        draftBanner: $("draftBanner"),
        draftMeta: $("draftMeta"),
        editToggleBtn: $("editToggleBtn"),
        draftEditor: $("draftEditor"),
        draftViewer: $("draftViewer"),
        complianceList: $("complianceList"),
        approveBtn: $("approveBtn"),
        backToInterviewBtn: $("backToInterviewBtn"),
        finalBanner: $("finalBanner"),
        finalTitle: $("finalTitle"),
        finalEffective: $("finalEffective"),
        finalComplianceLine: $("finalComplianceLine"),
        finalContent: $("finalContent"),
        finalDocId: $("finalDocId"),
        finalVersion: $("finalVersion"),
        finalDetails: $("finalDetails"),
        backToDashboardBtn: $("backToDashboardBtn"),
      };
      const state = { sessionId: null, session: null, dashboard: null, pollTimer: null, editDebounce: null };

      function escapeHtml(s) {
        return String(s ?? "")
          .replaceAll("&", "&amp;")
          .replaceAll("<", "&lt;")
          .replaceAll(">", "&gt;")
          .replaceAll('"', "&quot;");
      }

      function capitalize(s) {
        const text = String(s || "");
        return text.charAt(0).toUpperCase() + text.slice(1);
      }

      async function apiFetch(path, opts = {}) {
        const res = await fetch(path, {
          ...opts,
          headers: { "Content-Type": "application/json", ...(opts.headers || {}) },
        });
        const ct = res.headers.get("content-type") || "";
        const body = ct.includes("application/json") ? await res.json() : await res.text();
        if (!res.ok) {
          const detail = typeof body === "string" ? body : body.detail || JSON.stringify(body);
          throw new Error(detail);
        }
        return body;
      }

      function sessionPath(suffix = "") {
        return `/sessions/${encodeURIComponent(state.sessionId)}${suffix}`;
      }

      async function action(suffix, opts = { method: "POST" }) {
        clearError();
        const body = await apiFetch(sessionPath(suffix), opts);
        applySession(body.session);
        return body;
      }

      function showError(err) {
        const msg = err instanceof Error ? err.message : String(err);
        els.globalError.textContent = msg;
        els.globalError.classList.remove("hidden");
      }

      function clearError() {
        els.globalError.classList.add("hidden");
      }

      function fieldBlock(label, value) {
        return `<div><div class="field-label">${escapeHtml(label)}</div><div class="field-value">${escapeHtml(value)}</div></div>`;
      }

      function policyCard(policy) {
        return `
          <div class="card"><div class="body">
            <div style="display:flex;justify-content:space-between;gap:8px;">
              <div><strong>${escapeHtml(policy.title)}</strong><div class="muted">${escapeHtml(policy.type)}</div></div>
              <span class="badge ${escapeHtml(policy.status)}">${escapeHtml(capitalize(policy.status))}</span>
            </div>
            <div class="muted" style="margin-top:10px;">Updated ${escapeHtml(policy.last_updated)}</div>
          </div></div>`;
      }

      function renderDashboard() {
        const data = state.dashboard;
        if (!data) return;
        els.statsGrid.innerHTML = data.stats
          .map((s) => `<div class="card kpi"><div class="body"><div class="value ${escapeHtml(s.tone)}">${escapeHtml(s.value)}</div><div class="label">${escapeHtml(s.label)}</div></div></div>`)
          .join("");
        const cards = data.policies.map(policyCard).join("");
        els.dashboardPolicies.innerHTML = cards;
        els.policiesList.innerHTML = cards;
        els.policyTypes.innerHTML = data.policy_types
          .map((t) => `<div class="card"><div class="body"><div style="font-size:1.6rem;">${escapeHtml(t.icon)}</div><strong>${escapeHtml(t.name)}</strong></div></div>`)
          .join("");
      }

      function renderInterview(interview) {
        if (!interview) return;
        els.progressLabel.textContent = `${interview.progress}% Complete`;
        els.questionsLabel.textContent = `~${interview.questions_remaining} questions remaining`;
        els.progressBar.style.width = `${interview.progress}%`;

        const bubbles = interview.messages.map(
          (m) => `<div class="msg ${escapeHtml(m.sender)}"><div>${escapeHtml(m.content)}</div><div class="ts">${escapeHtml(m.timestamp)}</div></div>`
        );
        if (interview.loading) bubbles.push(`<div class="msg agent">&#8230;</div>`);
        els.messages.innerHTML = bubbles.join("");
        els.messages.scrollTop = els.messages.scrollHeight;

        els.interviewError.textContent = interview.error || "";
        els.interviewError.classList.toggle("hidden", !interview.error);
        els.sendBtn.disabled = interview.loading || !els.messageInput.value.trim();
        els.generateDraftBtn.classList.toggle("hidden", !interview.can_generate_draft);

        const gathered = interview.gathered_information || {};
        const blocks = Object.keys(GATHERED_LABELS)
          .filter((key) => gathered[key])
          .map((key) => fieldBlock(GATHERED_LABELS[key], gathered[key]));
        blocks.push(`<div class="muted" style="border-top:1px solid var(--line);padding-top:12px;">More details will appear as conversation progresses...</div>`);
        els.gatheredInfo.innerHTML = blocks.join("");
      }

      function renderCompliance(items) {
        if (!items || items.length === 0) {
          els.complianceList.innerHTML = `<div class="muted">No compliance findings reported.</div>`;
          return;
        }
        els.complianceList.innerHTML = items
          .map((item) => {
            const icon = item.status === "compliant" ? "&#10004;" : item.status === "needs-review" ? "&#9888;" : "&#10006;";
            return `
              <div class="compliance-item">
                <div class="field-label">${icon} ${escapeHtml(item.regulation)}</div>
                <div class="field-value">${escapeHtml(item.requirement)}</div>
                <div class="muted" style="margin-top:4px;">${escapeHtml(item.jurisdiction)}</div>
                <span class="badge risk-${escapeHtml(item.risk_level)}" style="margin-top:6px;">${escapeHtml(capitalize(item.risk_level))} Risk</span>
              </div>`;
          })
          .join("");
      }

      function renderReview(review) {
        if (!review) return;
        const draft = review.draft;
        els.draftTitle.textContent = draft.title;
        els.draftType.textContent = `Type: ${draft.type}`;
        els.draftStatusBadge.textContent = draft.metadata.status;
        els.draftMeta.innerHTML = [
          fieldBlock("Effective Date", draft.metadata.effective_date),
          fieldBlock("Departments", draft.metadata.departments),
          fieldBlock("Word Count", draft.word_count),
        ].join("");

        els.draftBanner.className = "banner hidden";
        if (review.status === "generating") {
          els.draftBanner.className = "banner info";
          els.draftBanner.textContent = "Generating draft with compliance research...";
        } else if (review.status === "error") {
          els.draftBanner.className = "banner error";
          els.draftBanner.textContent = review.error || "Draft generation failed";
        }

        els.editToggleBtn.textContent = review.edit_mode ? "Save" : "Edit";
        els.draftEditor.classList.toggle("hidden", !review.edit_mode);
        els.draftViewer.classList.toggle("hidden", review.edit_mode);
        if (document.activeElement !== els.draftEditor) els.draftEditor.value = review.edited_content;
        els.draftViewer.textContent = review.edited_content;
        renderCompliance(draft.compliance);
      }

      function renderFinal(final) {
        if (!final) return;
        const draft = final.draft;
        const summary = draft.compliance_summary || {};
        els.finalTitle.textContent = draft.title;
        els.finalEffective.textContent = `Effective Date: ${draft.metadata.effective_date}`;
        els.finalComplianceLine.textContent = `${summary.compliant || 0} of ${summary.total || 0} compliance items compliant`;
        els.finalContent.textContent = draft.content;
        els.finalDocId.textContent = `Document ID: ${final.document_id}`;
        els.finalVersion.textContent = `Version: ${final.version} | Generated: ${final.generated_on}`;

        if (final.status === "generating") {
          els.finalBanner.className = "banner info";
          els.finalBanner.textContent = "Finalizing policy...";
        } else if (final.status === "error") {
          els.finalBanner.className = "banner error";
          els.finalBanner.textContent = final.error || "Finalization failed";
        } else {
          els.finalBanner.className = "banner success";
          els.finalBanner.innerHTML = "<strong>Policy Generated Successfully</strong><br />Your policy has been finalized. Review the compliance summary before distribution.";
        }

        const openItems = (summary["needs-review"] || 0) + (summary["non-compliant"] || 0);
        els.finalDetails.innerHTML = [
          fieldBlock("Policy Type", draft.type),
          fieldBlock("Effective Date", draft.metadata.effective_date),
          fieldBlock("Departments", draft.metadata.departments),
          fieldBlock("Compliance Status", openItems ? `${openItems} item(s) need review` : "All items compliant"),
        ].join("");
      }

      function needsPolling(session) {
        if (!session) return false;
        if (session.interview && session.interview.loading) return true;
        if (session.review && session.review.status === "generating") return true;
        if (session.final && session.final.status === "generating") return true;
        return false;
      }

      function schedulePoll() {
        if (state.pollTimer) clearTimeout(state.pollTimer);
        state.pollTimer = null;
        if (!needsPolling(state.session)) return;
        state.pollTimer = setTimeout(() => {
          apiFetch(sessionPath())
            .then(applySession)
            .catch(showError);
        }, 700);
      }

      function initializeMountedFlow(session) {
        // The server runs each flow's initialization at most once per mount.
        if (session.screen === "draft-review" && session.review && session.review.status === "idle") {
          action("/draft/initialize").catch(showError);
        }
        if (session.screen === "final-policy" && session.final && session.final.status === "idle") {
          action("/final/initialize").catch(showError);
        }
      }

      function applySession(session) {
        state.session = session;
        els.headerTitle.textContent = session.header_title;
        els.sidebar.classList.toggle("collapsed", !session.sidebar_open);
        for (const btn of els.nav.querySelectorAll("button")) {
          btn.classList.toggle("active", session.screen === "dashboard" && btn.dataset.screen === "dashboard");
        }
        for (const screen of SCREENS) {
          $(`screen-${screen}`).classList.toggle("hidden", session.screen !== screen);
        }
        renderDashboard();
        renderInterview(session.interview);
        renderReview(session.review);
        renderFinal(session.final);
        if (session.screen === "settings") {
          apiFetch("/health").then((h) => { els.healthJson.textContent = JSON.stringify(h, null, 2); }).catch(showError);
        }
        initializeMountedFlow(session);
        schedulePoll();
      }

      async function ensureSession() {
        const saved = sessionStorage.getItem(SESSION_KEY);
        if (saved) {
          state.sessionId = saved;
          try {
            applySession(await apiFetch(sessionPath()));
            return;
          } catch (err) {
            sessionStorage.removeItem(SESSION_KEY);
          }
        }
        const created = await apiFetch("/sessions", { method: "POST" });
        state.sessionId = created.session_id;
        sessionStorage.setItem(SESSION_KEY, created.session_id);
        applySession(created);
      }

      async function sendMessage() {
        const text = els.messageInput.value;
        if (!text.trim() || (state.session.interview && state.session.interview.loading)) return;
        els.messageInput.value = "";
        await action("/interview/messages", { method: "POST", body: JSON.stringify({ message: text }) });
      }

      function saveDraftEdits() {
        return action("/draft/content", { method: "PUT", body: JSON.stringify({ content: els.draftEditor.value }) });
      }

      function bind() {
        els.sidebarToggle.addEventListener("click", () => action("/sidebar/toggle").catch(showError));
        for (const btn of els.nav.querySelectorAll("button")) {
          btn.addEventListener("click", () =>
            action("/navigate", { method: "POST", body: JSON.stringify({ screen: btn.dataset.screen }) }).catch(showError)
          );
        }
        els.startPolicyBtn.addEventListener("click", () => action("/start").catch(showError));
        els.libraryStartBtn.addEventListener("click", () => action("/start").catch(showError));
        els.sendBtn.addEventListener("click", () => sendMessage().catch(showError));
        els.messageInput.addEventListener("input", () => {
          const loading = state.session && state.session.interview && state.session.interview.loading;
          els.sendBtn.disabled = loading || !els.messageInput.value.trim();
        });
        els.messageInput.addEventListener("keydown", (e) => {
          if (e.key === "Enter" && !e.shiftKey) {
            e.preventDefault();
            sendMessage().catch(showError);
          }
        });
        els.generateDraftBtn.addEventListener("click", () => action("/interview/generate-draft").catch(showError));
        els.editToggleBtn.addEventListener("click", async () => {
          try {
            if (state.session.review && state.session.review.edit_mode) await saveDraftEdits();
            await action("/draft/edit-mode");
          } catch (err) {
            showError(err);
          }
        });
        els.draftEditor.addEventListener("input", () => {
          if (state.editDebounce) clearTimeout(state.editDebounce);
          state.editDebounce = setTimeout(() => saveDraftEdits().catch(showError), 500);
        });
        els.approveBtn.addEventListener("click", async () => {
          try {
            if (state.session.review && state.session.review.edit_mode) await saveDraftEdits();
            await action("/draft/approve");
          } catch (err) {
            showError(err);
          }
        });
        els.backToInterviewBtn.addEventListener("click", () => action("/draft/back").catch(showError));
        els.backToDashboardBtn.addEventListener("click", () => action("/dashboard").catch(showError));
        for (const btn of document.querySelectorAll("[data-export]")) {
          btn.addEventListener("click", () => {
            window.location.href = sessionPath(`/export?format=${encodeURIComponent(btn.dataset.export)}`);
          });
        }
      }

      async function boot() {
        bind();
        state.dashboard = await apiFetch("/dashboard");
        await ensureSession();
      }

      boot().catch(showError);
    })();
  </script>
</body>
</html>
"""
